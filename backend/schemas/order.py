from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date

from models.order import OrderStatus


# Output schema for an individual order line item
class OrderItemOut(BaseModel):
    id: int
    product_id: int
    quantity: int
    discount: float
    ordered_product_price: float
    class Config:
        from_attributes = True


# Output schema for the payment attached to an order
class PaymentOut(BaseModel):
    id: int
    payment_method: str
    pg_name: Optional[str] = None
    pg_payment_id: Optional[str] = None
    pg_status: Optional[str] = None
    pg_response_message: Optional[str] = None
    class Config:
        from_attributes = True


# Input schema for placing an order; payment method travels in the path
class OrderRequest(BaseModel):
    address_id: int
    pg_name: Optional[str] = None
    pg_payment_id: Optional[str] = None
    pg_status: Optional[str] = None
    pg_response_message: Optional[str] = None

# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    email: str
    order_date: date
    total_amount: float
    status: OrderStatus
    address_id: int
    payment: Optional[PaymentOut] = None
    items: List[OrderItemOut]
    class Config:
        from_attributes = True

# Schema for paginated order lists
class OrdersPage(BaseModel):
    content: List[OrderResponse]
    page_number: int
    page_size: int
    total_elements: int
    total_pages: int
    last_page: bool

# Schema for updating order status
class OrderStatusPatch(BaseModel):
    status: OrderStatus = Field(description="One of the order status labels, e.g. 'Shipped'")
