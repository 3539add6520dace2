"""Order listing, seller-scoped listing and status updates."""

import math
from datetime import date, timedelta

import pytest

from exceptions import NotFoundError, InvalidStateError
from models.order import Order, OrderStatus
from services.orders import list_orders, list_seller_orders, update_order_status, parse_status


class TestListOrders:
    @pytest.mark.parametrize("count,size", [(5, 2), (4, 2), (1, 10), (7, 3)])
    def test_only_final_page_is_last(self, db, make_product, make_order, count, size):
        mug = make_product()
        for _ in range(count):
            make_order([(mug, 1)])

        pages = math.ceil(count / size)
        seen = []
        for number in range(pages):
            page = list_orders(db, number, size, "id", "asc")
            assert page["total_elements"] == count
            assert page["total_pages"] == pages
            assert page["page_number"] == number
            assert page["page_size"] == size
            assert page["last_page"] is (number == pages - 1)
            seen.extend(o.id for o in page["content"])

        assert len(seen) == count
        assert len(set(seen)) == count

    def test_empty_result(self, db):
        page = list_orders(db, 0, 10, "id", "asc")
        assert page["content"] == []
        assert page["total_elements"] == 0
        assert page["total_pages"] == 0
        assert page["last_page"] is True

    def test_sort_ascending_case_insensitive(self, db, make_product, make_order):
        mug = make_product()
        for total in (30.0, 10.0, 20.0):
            make_order([(mug, 1)], total=total)

        page = list_orders(db, 0, 10, "total_amount", "ASC")
        assert [o.total_amount for o in page["content"]] == [10.0, 20.0, 30.0]

    @pytest.mark.parametrize("direction", ["desc", "DESC", "sideways", ""])
    def test_anything_but_asc_sorts_descending(self, db, make_product, make_order, direction):
        mug = make_product()
        today = date.today()
        for days in (2, 0, 1):
            make_order([(mug, 1)], order_date=today - timedelta(days=days))

        page = list_orders(db, 0, 10, "order_date", direction)
        dates = [o.order_date for o in page["content"]]
        assert dates == sorted(dates, reverse=True)

    def test_unknown_sort_field(self, db):
        with pytest.raises(InvalidStateError, match="Cannot sort orders by"):
            list_orders(db, 0, 10, "password", "asc")

    @pytest.mark.parametrize("number,size", [(-1, 10), (0, 0)])
    def test_invalid_paging(self, db, number, size):
        with pytest.raises(InvalidStateError):
            list_orders(db, number, size, "id", "asc")


class TestListSellerOrders:
    def test_only_orders_with_seller_products(self, db, seller, other_seller, make_product, make_order):
        mine = make_product(name="Mine", owner=seller)
        theirs = make_product(name="Theirs", owner=other_seller)

        only_mine = make_order([(mine, 1)])
        mixed = make_order([(theirs, 2), (mine, 1)])
        make_order([(theirs, 1)])

        page = list_seller_orders(db, 0, 10, "id", "asc", seller_id=seller.id)
        assert [o.id for o in page["content"]] == [only_mine.id, mixed.id]
        assert page["total_elements"] == 2

        for order in page["content"]:
            assert any(it.product.seller_id == seller.id for it in order.items)

    def test_pages_are_filled_with_seller_orders(self, db, seller, other_seller, make_product, make_order):
        mine = make_product(name="Mine", owner=seller)
        theirs = make_product(name="Theirs", owner=other_seller)
        # interleave so that unfiltered paging would under-fill pages
        for _ in range(3):
            make_order([(theirs, 1)])
            make_order([(mine, 1)])

        first = list_seller_orders(db, 0, 2, "id", "asc", seller_id=seller.id)
        second = list_seller_orders(db, 1, 2, "id", "asc", seller_id=seller.id)

        assert len(first["content"]) == 2
        assert first["last_page"] is False
        assert len(second["content"]) == 1
        assert second["last_page"] is True
        assert first["total_pages"] == 2
        assert first["total_elements"] == 3

    def test_seller_without_sales(self, db, seller, other_seller, make_product, make_order):
        theirs = make_product(owner=other_seller)
        make_order([(theirs, 1)])

        page = list_seller_orders(db, 0, 10, "id", "asc", seller_id=seller.id)
        assert page["content"] == []
        assert page["last_page"] is True


class TestUpdateOrderStatus:
    def test_updates_status_only(self, db, make_product, make_order):
        mug = make_product()
        order = make_order([(mug, 2)], total=20.0)
        before = (order.email, order.total_amount, order.order_date, order.address_id, order.payment_id)

        updated = update_order_status(db, order.id, OrderStatus.SHIPPED)

        assert updated.status == OrderStatus.SHIPPED
        db.expire_all()
        stored = db.get(Order, order.id)
        assert stored.status == OrderStatus.SHIPPED
        assert (stored.email, stored.total_amount, stored.order_date, stored.address_id, stored.payment_id) == before
        assert len(stored.items) == 1

    @pytest.mark.parametrize("raw", ["Shipped", "SHIPPED", "shipped"])
    def test_accepts_label_or_name(self, raw):
        assert parse_status(raw) == OrderStatus.SHIPPED

    def test_unknown_status(self, db, make_product, make_order):
        order = make_order([(make_product(), 1)])
        with pytest.raises(InvalidStateError, match="Unknown order status"):
            update_order_status(db, order.id, "Teleported")

    def test_missing_order(self, db):
        with pytest.raises(NotFoundError) as exc:
            update_order_status(db, 404, OrderStatus.SHIPPED)
        assert exc.value.resource == "Order"
        assert exc.value.value == 404

    @pytest.mark.parametrize("terminal", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_status_is_final(self, db, make_product, make_order, terminal):
        order = make_order([(make_product(), 1)], status=terminal)
        with pytest.raises(InvalidStateError, match="Cannot change status"):
            update_order_status(db, order.id, OrderStatus.PROCESSING)
