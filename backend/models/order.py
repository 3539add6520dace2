# backend/models/order.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, Date, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum

# Order lifecycle; DELIVERED and CANCELLED are terminal
class OrderStatus(str, enum.Enum):
    ACCEPTED = "Order Accepted !"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


# Record of the payment-gateway result attached to exactly one order
class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_method = Column(String, nullable=False)

    # Gateway result fields, stored as received
    pg_name = Column(String, nullable=True)
    pg_payment_id = Column(String, nullable=True)
    pg_status = Column(String, nullable=True)
    pg_response_message = Column(String, nullable=True)

    order = relationship("Order", back_populates="payment", uselist=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, index=True)
    order_date = Column(Date, nullable=False)
    total_amount = Column(Float, nullable=False)
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.ACCEPTED)

    address_id = Column(Integer, ForeignKey("addresses.id"), nullable=False)
    payment_id = Column(Integer, ForeignKey("payments.id"), unique=True, nullable=False)

    address = relationship("Address")
    payment = relationship("Payment", back_populates="order")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), index=True, nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    quantity = Column(Integer, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    # Price copied from the cart line when the order was placed
    ordered_product_price = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
