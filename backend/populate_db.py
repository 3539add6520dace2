import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.users import User
from models.product import Category, Product
from models.address import Address

# Demo catalog: (name, price, discount %, stock)
DEMO_PRODUCTS = [
    ("Ceramic mug", 12.0, 0, 40),
    ("Espresso cups (set of 4)", 24.0, 10, 15),
    ("Pour-over kettle", 49.0, 20, 8),
]

def load_demo_data():
    """Creates a seller, a buyer with an address and a small catalog."""
    init_db()
    session = SessionLocal()
    try:
        if session.query(User).filter(User.email == "seller@example.com").first():
            print("Demo data already present, skipping.")
            return

        seller = User(email="seller@example.com", role="SELLER", first_name="Sam", last_name="Seller")
        buyer = User(email="buyer@example.com", role="USER", first_name="Bea", last_name="Buyer")
        admin = User(email="admin@example.com", role="ADMIN", first_name="Ada", last_name="Admin")
        session.add_all([seller, buyer, admin])

        kitchen = Category(name="Kitchen")
        session.add(kitchen)
        session.flush()

        for name, price, discount, stock in DEMO_PRODUCTS:
            session.add(Product(
                name=name, price=price, discount=discount,
                special_price=Product.compute_special_price(price, discount),
                quantity=stock, category=kitchen, seller_id=seller.id,
            ))

        session.add(Address(
            street="1 Market Street", building_name="Unit 4", city="Springfield",
            state="IL", country="USA", pincode="62701", user_id=buyer.id,
        ))
        session.commit()
        print(f"Loaded {len(DEMO_PRODUCTS)} products and 3 users.")
    finally:
        session.close()

if __name__ == "__main__":
    load_demo_data()
