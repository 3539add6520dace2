# backend/services/carts.py
import logging
from typing import Optional

from sqlalchemy.orm import Session

from exceptions import NotFoundError, InvalidStateError
from models.users import User
from models.product import Product
from models.cart import Cart, CartItem

logger = logging.getLogger(__name__)

# Look up the cart owned by the user with this email
def get_cart_by_email(db: Session, email: str, lock: bool = False) -> Optional[Cart]:
    q = db.query(Cart).join(User, Cart.user_id == User.id).filter(User.email == email)
    if lock:
        q = q.with_for_update(of=Cart)
    return q.first()

# Retrieve the user's cart or create an empty one
def get_or_create_cart(db: Session, user: User) -> Cart:
    cart = db.query(Cart).filter(Cart.user_id == user.id).first()
    if not cart:
        cart = Cart(user_id=user.id)
        db.add(cart)
        db.commit()
        db.refresh(cart)
    return cart

# List price plus absolute line discount, so a line totals special_price * quantity
def _apply_line_pricing(item: CartItem, product: Product):
    item.product_price = product.price
    item.discount = round((product.price - product.special_price) * item.quantity, 2)

def add_product_to_cart(db: Session, user: User, product_id: int, quantity: int) -> Cart:
    if quantity < 1:
        raise InvalidStateError("Quantity must be at least 1")

    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError("Product", "productId", product_id)

    cart = get_or_create_cart(db, user)
    item = db.query(CartItem).filter(
        CartItem.cart_id == cart.id, CartItem.product_id == product_id
    ).first()

    new_quantity = quantity + (item.quantity if item else 0)
    # Validate stock availability
    if new_quantity > product.quantity:
        raise InvalidStateError(f"Only {product.quantity} of {product.name} available")

    if item:
        item.quantity = new_quantity
    else:
        item = CartItem(cart_id=cart.id, product_id=product.id, quantity=new_quantity)
        db.add(item)
    _apply_line_pricing(item, product)

    db.commit()
    db.refresh(cart)
    logger.info("Added product %s x%s to cart %s", product_id, quantity, cart.id)
    return cart

# Remove one product line from a cart. Does not commit: callers own the transaction.
def remove_product_from_cart(db: Session, cart_id: int, product_id: int) -> CartItem:
    item = db.query(CartItem).filter(
        CartItem.cart_id == cart_id, CartItem.product_id == product_id
    ).first()
    if not item:
        raise NotFoundError("CartItem", "productId", product_id)

    cart = item.cart
    cart.items.remove(item)
    db.flush()
    return item

# Standalone removal requested by the cart owner
def delete_product_from_cart(db: Session, user: User, product_id: int) -> Cart:
    cart = get_or_create_cart(db, user)
    remove_product_from_cart(db, cart.id, product_id)
    db.commit()
    db.refresh(cart)
    return cart
