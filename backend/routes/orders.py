# backend/routes/orders.py
from typing import Literal
from fastapi import APIRouter, Depends, HTTPException, Request, Query
from sqlalchemy.orm import Session
import logging

from config import settings
from database import get_db
from utils.tokenJWT import get_current_user, role_required
from utils.audit import write_log, client_ip
from models.users import User
from services import orders as order_service
from schemas.order import OrderRequest, OrderResponse, OrdersPage, OrderStatusPatch

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

SortField = Literal["id", "email", "order_date", "total_amount", "status"]

# Map a page dict from the service layer to the response schema
def _page_to_out(page: dict) -> OrdersPage:
    return OrdersPage(
        content=[OrderResponse.model_validate(o) for o in page["content"]],
        page_number=page["page_number"],
        page_size=page["page_size"],
        total_elements=page["total_elements"],
        total_pages=page["total_pages"],
        last_page=page["last_page"],
    )

# Convert the caller's cart into an order
@router.post("/users/payments/{payment_method}", response_model=OrderResponse)
def place_order(
    payment_method: str,
    payload: OrderRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    order = order_service.place_order(
        db,
        email=current_user.email,
        address_id=payload.address_id,
        payment_method=payment_method,
        pg_name=payload.pg_name,
        pg_payment_id=payload.pg_payment_id,
        pg_status=payload.pg_status,
        pg_response_message=payload.pg_response_message,
    )
    out = OrderResponse.model_validate(order)

    write_log(
        db, user_id=current_user.id, action="ORDER_PLACE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": out.id, "total": out.total_amount, "items": len(out.items), "payment_method": payment_method}
    )
    return out


# List all orders (Admin only)
@router.get("", response_model=OrdersPage)
def list_orders(
    page_number: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: SortField = "order_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("ADMIN"))
):
    page = order_service.list_orders(db, page_number, page_size, sort_by, sort_order)
    return _page_to_out(page)


# List orders containing the calling seller's products
@router.get("/seller", response_model=OrdersPage)
def list_seller_orders(
    page_number: int = Query(0, ge=0),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort_by: SortField = "order_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("SELLER", "ADMIN"))
):
    page = order_service.list_seller_orders(db, page_number, page_size, sort_by, sort_order, seller_id=current_user.id)
    return _page_to_out(page)


# Change the lifecycle status of an order (Admin/Seller only)
@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(role_required("ADMIN", "SELLER"))
):
    old_status = order_service.get_order(db, order_id).status
    # Sellers may only touch orders holding their products
    if (current_user.role or "").upper() == "SELLER" and not order_service.seller_owns_order(db, order_id, current_user.id):
        raise HTTPException(status_code=403, detail="Forbidden")

    order = order_service.update_order_status(db, order_id, payload.status)
    out = OrderResponse.model_validate(order)

    write_log(db, user_id=current_user.id, action="ORDER_STATUS_CHANGE", resource="orders", status="SUCCESS",
        ip=client_ip(request), meta={"order_id": order_id, "old": old_status.value, "new": out.status.value})
    return out
