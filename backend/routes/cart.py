# backend/routes/cart.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from models.users import User
from models.cart import Cart
from services import carts as cart_service
from schemas.cart import CartAddItem, CartOut, CartItemOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def _cart_to_out(cart: Cart) -> CartOut:
    items_out = []
    for it in cart.items:
        items_out.append(CartItemOut(
            id=it.id,
            product_id=it.product_id,
            name=it.product.name if it.product else "",
            quantity=it.quantity,
            product_price=it.product_price,
            discount=it.discount,
            line_total=round(it.product_price * it.quantity - it.discount, 2),
        ))
    return CartOut(id=cart.id, items=items_out, total_amount=cart.total_amount)

@router.get("", response_model=CartOut)
def get_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.get_or_create_cart(db, current_user)
    return _cart_to_out(cart)

@router.post("/add", response_model=CartOut)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.add_product_to_cart(db, current_user, payload.product_id, payload.quantity)
    out = _cart_to_out(cart)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": payload.product_id, "quantity": payload.quantity, "cart_items": len(out.items), "total": out.total_amount},
    )
    return out

@router.delete("/items/{product_id}", response_model=CartOut)
def delete_cart_item(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.delete_product_from_cart(db, current_user, product_id)
    out = _cart_to_out(cart)

    write_log(
        db,
        user_id=current_user.id,
        action="CART_DELETE",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product_id, "cart_items": len(out.items), "total": out.total_amount},
    )
    return out
