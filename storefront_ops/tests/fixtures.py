"""
Shared fixtures for the storefront tests: an in-memory SQLite database and
helpers to seed users, stores, products and orders.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront_ops.models import Base, User, Store, Product, Order, Role
from storefront_ops.services.auth_service import UserSession
from storefront_ops.utils.security import hash_password

def make_session():
    """Create a fresh in-memory database and return (engine, session)."""
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    return engine, session

def add_user(session, name, password='Passw0rd!', latitude=10.0, longitude=10.0, role=Role.CUSTOMER):
    user = User(
        name=name,
        password=hash_password(password),
        latitude=latitude,
        longitude=longitude,
        type=role
    )
    session.add(user)
    session.commit()
    return user

def add_store(session, store_id, latitude=10.0, longitude=10.0, manager=None):
    store = Store(
        id=store_id,
        latitude=latitude,
        longitude=longitude,
        manager_id=manager.id if manager is not None else None
    )
    session.add(store)
    session.commit()
    return store

def add_product(session, store_id, name, units=0, price=1.0):
    product = Product(store_id=store_id, product_name=name, units_in_stock=units, price_per_unit=price)
    session.add(product)
    session.commit()
    return product

def add_order(session, customer, store_id, product_name, units=1):
    order = Order(customer_id=customer.id, store_id=store_id, product_name=product_name, units_ordered=units)
    session.add(order)
    session.commit()
    return order

def session_for(user):
    return UserSession(user_id=user.id, name=user.name, role=user.type)

class DatabaseTestCase:
    """Mixin giving each test its own seeded-from-scratch database.
    
    Use together with unittest.TestCase.
    """
    
    def setUp(self):
        self.engine, self.session = make_session()
    
    def tearDown(self):
        self.session.close()
        self.engine.dispose()
