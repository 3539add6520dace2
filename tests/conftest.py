import os

# Settings are read at import time; point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from models.users import User
from models.product import Category, Product
from models.address import Address
from models.order import Order, OrderItem, Payment, OrderStatus
from models.log import Log  # noqa: F401
from services import carts as cart_service
from utils.tokenJWT import create_access_token


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _user(db, email, role):
    user = User(email=email, role=role, first_name=role.title(), last_name="Test")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def buyer(db):
    return _user(db, "buyer@example.com", "USER")


@pytest.fixture()
def seller(db):
    return _user(db, "seller@example.com", "SELLER")


@pytest.fixture()
def other_seller(db):
    return _user(db, "other-seller@example.com", "SELLER")


@pytest.fixture()
def admin(db):
    return _user(db, "admin@example.com", "ADMIN")


@pytest.fixture()
def category(db):
    category = Category(name="Kitchen")
    db.add(category)
    db.commit()
    return category


@pytest.fixture()
def make_product(db, category, seller):
    def _make(name="Mug", price=10.0, quantity=10, discount=0.0, owner=None):
        product = Product(
            name=name,
            price=price,
            discount=discount,
            special_price=Product.compute_special_price(price, discount),
            quantity=quantity,
            category=category,
            seller_id=(owner or seller).id,
        )
        db.add(product)
        db.commit()
        return product
    return _make


@pytest.fixture()
def address(db, buyer):
    address = Address(
        street="1 Market Street", building_name="Unit 4", city="Springfield",
        state="IL", country="USA", pincode="62701", user_id=buyer.id,
    )
    db.add(address)
    db.commit()
    return address


@pytest.fixture()
def fill_cart(db):
    def _fill(user, *lines):
        cart = None
        for product, quantity in lines:
            cart = cart_service.add_product_to_cart(db, user, product.id, quantity)
        return cart
    return _fill


# Inserts an order row directly, bypassing placement, for query tests
@pytest.fixture()
def make_order(db, address):
    def _make(lines, email="buyer@example.com", total=None, order_date=None, status=OrderStatus.ACCEPTED):
        payment = Payment(payment_method="card", pg_name="stripe", pg_payment_id="pi_x", pg_status="succeeded")
        db.add(payment)
        db.flush()
        order = Order(
            email=email,
            order_date=order_date or date.today(),
            total_amount=total if total is not None else sum(p.price * q for p, q in lines),
            status=status,
            address_id=address.id,
            payment_id=payment.id,
        )
        db.add(order)
        db.flush()
        for product, quantity in lines:
            db.add(OrderItem(order=order, product_id=product.id, quantity=quantity,
                             discount=0.0, ordered_product_price=product.price))
        db.commit()
        return order
    return _make


@pytest.fixture()
def auth_header():
    def _header(user):
        token = create_access_token({"sub": user.email, "role": user.role})
        return {"Authorization": f"Bearer {token}"}
    return _header
