# backend/exceptions.py


# Base class for errors raised by the shop services
class ShopError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# A looked-up row does not exist (cart, address, order, product, cart item)
class NotFoundError(ShopError):
    def __init__(self, resource: str, field: str, value):
        super().__init__(f"{resource} not found with {field}: {value}")
        self.resource = resource
        self.field = field
        self.value = value


# A precondition failed before anything was written
class InvalidStateError(ShopError):
    pass


# The database rejected the unit of work; everything was rolled back
class TransactionFailure(ShopError):
    pass
