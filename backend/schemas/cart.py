from pydantic import BaseModel, Field
from typing import List

# Request schema for adding a product to the cart
class CartAddItem(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

# Response schema for a single cart line item
class CartItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    quantity: int
    product_price: float
    discount: float
    line_total: float

# Response schema for the entire cart summary
class CartOut(BaseModel):
    id: int
    items: List[CartItemOut]
    total_amount: float
