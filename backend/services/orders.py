# backend/services/orders.py
import logging
import math
from datetime import date
from typing import Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from exceptions import ShopError, NotFoundError, InvalidStateError, TransactionFailure
from models.address import Address
from models.cart import CartItem
from models.order import Order, OrderItem, Payment, OrderStatus, TERMINAL_STATUSES
from models.product import Product
from services import carts

logger = logging.getLogger(__name__)

# Order fields accepted as sort keys by the listing endpoints
SORTABLE_FIELDS = {
    "id": Order.id,
    "email": Order.email,
    "order_date": Order.order_date,
    "total_amount": Order.total_amount,
    "status": Order.status,
}


# Lock every product in the cart and make sure each can cover its line
def _lock_products(db: Session, cart_items: List[CartItem]) -> Dict[int, Product]:
    ids = sorted({ci.product_id for ci in cart_items})
    # Overwrite stale copies already held by this session
    rows = (
        db.query(Product)
        .filter(Product.id.in_(ids))
        .order_by(Product.id)
        .with_for_update()
        .populate_existing()
        .all()
    )
    products = {p.id: p for p in rows}

    for ci in cart_items:
        product = products.get(ci.product_id)
        if product is None:
            raise NotFoundError("Product", "productId", ci.product_id)
        if product.quantity < ci.quantity:
            raise InvalidStateError(
                f"Insufficient stock for product {product.name}: {product.quantity} left, {ci.quantity} requested"
            )
    return products


def place_order(
    db: Session,
    email: str,
    address_id: int,
    payment_method: str,
    pg_name: Optional[str],
    pg_payment_id: Optional[str],
    pg_status: Optional[str],
    pg_response_message: Optional[str],
) -> Order:
    """
    Turns the user's cart into an order in a single transaction.

    Creates the Payment, the Order and one OrderItem per cart line, decrements
    product stock and empties the cart. Either all of it is committed or the
    session is rolled back and the error re-raised: NotFoundError and
    InvalidStateError unchanged, database errors as TransactionFailure.
    """
    logger.info("Placing order for %s (address %s, method %s)", email, address_id, payment_method)
    try:
        cart = carts.get_cart_by_email(db, email, lock=True)
        if cart is None:
            raise NotFoundError("Cart", "email", email)

        address = db.query(Address).filter(Address.id == address_id).first()
        if address is None:
            raise NotFoundError("Address", "addressId", address_id)

        cart_items = list(cart.items)
        if not cart_items:
            raise InvalidStateError("Cart is empty")

        products = _lock_products(db, cart_items)

        order = Order(
            email=email,
            order_date=date.today(),
            total_amount=cart.total_amount,
            status=OrderStatus.ACCEPTED,
            address=address,
        )

        # Payment gets its id first so the order row can reference it
        payment = Payment(
            payment_method=payment_method,
            pg_name=pg_name,
            pg_payment_id=pg_payment_id,
            pg_status=pg_status,
            pg_response_message=pg_response_message,
        )
        db.add(payment)
        db.flush()

        order.payment = payment
        db.add(order)
        db.flush()

        # Prices are copied from the cart lines, never read from the product again
        order_items = [
            OrderItem(
                order=order,
                product_id=ci.product_id,
                quantity=ci.quantity,
                discount=ci.discount,
                ordered_product_price=ci.product_price,
            )
            for ci in cart_items
        ]
        db.add_all(order_items)
        db.flush()

        for ci in cart_items:
            product = products[ci.product_id]
            product.quantity -= ci.quantity
            carts.remove_product_from_cart(db, cart.id, ci.product_id)

        db.commit()
    except ShopError as e:
        db.rollback()
        logger.warning("Order placement for %s rejected: %s", email, e)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Order placement for %s rolled back", email)
        raise TransactionFailure(f"Order could not be placed: {e}") from e
    except Exception:
        db.rollback()
        logger.exception("Unexpected error while placing order for %s", email)
        raise

    db.refresh(order)
    logger.info("Order %s placed for %s, total %.2f, %d items", order.id, email, order.total_amount, len(order_items))
    return order


def _sort_clause(sort_by: str, sort_order: str):
    column = SORTABLE_FIELDS.get(sort_by)
    if column is None:
        raise InvalidStateError(f"Cannot sort orders by '{sort_by}'")
    # Order id breaks ties so pages never overlap
    if (sort_order or "").lower() == "asc":
        return [column.asc(), Order.id.asc()]
    return [column.desc(), Order.id.desc()]


def _paginate(query: Query, page_number: int, page_size: int, sort_by: str, sort_order: str) -> dict:
    if page_number < 0:
        raise InvalidStateError("Page number must not be negative")
    if page_size < 1:
        raise InvalidStateError("Page size must be at least 1")

    order_by = _sort_clause(sort_by, sort_order)
    total = query.count()
    rows = (
        query.options(selectinload(Order.items), selectinload(Order.payment))
        .order_by(*order_by)
        .offset(page_number * page_size)
        .limit(page_size)
        .all()
    )
    total_pages = math.ceil(total / page_size)
    return {
        "content": rows,
        "page_number": page_number,
        "page_size": page_size,
        "total_elements": total,
        "total_pages": total_pages,
        "last_page": page_number >= total_pages - 1,
    }


def list_orders(db: Session, page_number: int, page_size: int, sort_by: str, sort_order: str) -> dict:
    return _paginate(db.query(Order), page_number, page_size, sort_by, sort_order)


# Orders holding at least one item of this seller; filtered before paging
def list_seller_orders(
    db: Session, page_number: int, page_size: int, sort_by: str, sort_order: str, seller_id: int
) -> dict:
    query = db.query(Order).filter(
        Order.items.any(OrderItem.product.has(Product.seller_id == seller_id))
    )
    return _paginate(query, page_number, page_size, sort_by, sort_order)


def get_order(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if order is None:
        raise NotFoundError("Order", "orderId", order_id)
    return order


# True when the order holds at least one product of this seller
def seller_owns_order(db: Session, order_id: int, seller_id: int) -> bool:
    return db.query(
        db.query(Order)
        .filter(Order.id == order_id, Order.items.any(OrderItem.product.has(Product.seller_id == seller_id)))
        .exists()
    ).scalar()


# Accepts an OrderStatus, its value ("Shipped") or its name ("SHIPPED")
def parse_status(value: Union[OrderStatus, str]) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    for member in OrderStatus:
        if value == member.value or str(value).upper() == member.name:
            return member
    raise InvalidStateError(f"Unknown order status: {value}")


def update_order_status(db: Session, order_id: int, status: Union[OrderStatus, str]) -> Order:
    new_status = parse_status(status)
    order = get_order(db, order_id)

    old_status = order.status
    if old_status in TERMINAL_STATUSES and new_status != old_status:
        raise InvalidStateError(f"Cannot change status from {old_status.value}")

    order.status = new_status
    db.commit()
    db.refresh(order)
    logger.info("Order %s status %s -> %s", order.id, old_status.value, new_status.value)
    return order
