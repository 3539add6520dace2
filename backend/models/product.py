# backend/models/product.py
from sqlalchemy import Column, Integer, String, Float, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base


# Catalog category owning a group of products
class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)

    products = relationship("Product", back_populates="category", cascade="all, delete-orphan")


# Model Product
# A single catalog entry. Prices and stock are guarded by check constraints;
# special_price is the list price with the percentage discount applied.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(String)

    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)
    discount = Column(Float, CheckConstraint("discount >= 0 AND discount <= 100"), nullable=False, default=0)
    special_price = Column(Float, nullable=False)

    # Quantity on hand
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False, default=0)

    category_id = Column(Integer, ForeignKey("categories.id"), index=True, nullable=True)
    # Seller owning the product
    seller_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)

    category = relationship("Category", back_populates="products")
    seller = relationship("User")

    @staticmethod
    def compute_special_price(price: float, discount: float) -> float:
        return round(price - (discount * 0.01) * price, 2)
