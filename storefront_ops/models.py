# storefront_ops/models.py
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, ForeignKey, Enum, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
import enum

Base = declarative_base()

class Role(enum.Enum):
    """Enum for account roles.
    
    Values:
        CUSTOMER ('customer'): Browses nearby stores and places orders
        MANAGER ('manager'): Maintains inventory of owned stores and reviews analytics
        ADMIN ('admin'): Manages accounts and any product
    """
    CUSTOMER = 'customer'
    MANAGER = 'manager'
    ADMIN = 'admin'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> 'Role':
        """Create a Role from a string value (case-insensitive).
        
        Args:
            value: String value ('customer', 'manager', 'admin')
            
        Returns:
            Role enum value
            
        Raises:
            ValueError if the string value is not valid
        """
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise ValueError(f"Invalid role: {value}. Valid values are: customer, manager, admin")

class User(Base):
    __tablename__ = 'users'
    
    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)
    password = Column(String(200), nullable=False)  # salt$digest, see utils.security
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    type = Column(Enum(Role), nullable=False, default=Role.CUSTOMER)
    
    stores = relationship("Store", back_populates="manager")
    orders = relationship("Order", back_populates="customer")

    __table_args__ = (
        Index('ix_users_name', 'name'),
    )

    def __repr__(self):
        return f"<User id={self.id} name={self.name!r} type={self.type}>"

class Store(Base):
    __tablename__ = 'store'
    
    id = Column(Integer, primary_key=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    manager_id = Column(Integer, ForeignKey('users.id'))
    
    manager = relationship("User", back_populates="stores")
    products = relationship("Product", back_populates="store")

    def __repr__(self):
        return f"<Store id={self.id} manager_id={self.manager_id}>"

class Product(Base):
    __tablename__ = 'product'
    
    store_id = Column(Integer, ForeignKey('store.id'), primary_key=True)
    product_name = Column(String(30), primary_key=True)
    units_in_stock = Column(Integer, nullable=False, default=0)
    price_per_unit = Column(Float, nullable=False, default=0.0)
    
    store = relationship("Store", back_populates="products")

    __table_args__ = (
        CheckConstraint('units_in_stock >= 0', name='ck_product_units_non_negative'),
        CheckConstraint('price_per_unit >= 0', name='ck_product_price_non_negative'),
    )

    def __repr__(self):
        return f"<Product store_id={self.store_id} name={self.product_name!r} units={self.units_in_stock}>"

class Order(Base):
    """Customer order. Rows are append-only."""
    __tablename__ = 'orders'
    
    order_number = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    store_id = Column(Integer, ForeignKey('store.id'), nullable=False)
    product_name = Column(String(30), nullable=False)
    units_ordered = Column(Integer, nullable=False)
    order_time = Column(DateTime, nullable=False, server_default=func.now())
    
    customer = relationship("User", back_populates="orders")

    __table_args__ = (
        CheckConstraint('units_ordered > 0', name='ck_orders_units_positive'),
        Index('ix_orders_customer_time', 'customer_id', 'order_time'),
    )

class ProductUpdate(Base):
    """Audit record of a manager's product update."""
    __tablename__ = 'product_updates'
    
    update_number = Column(Integer, primary_key=True)
    store_id = Column(Integer, ForeignKey('store.id'), nullable=False)
    manager_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    product_name = Column(String(30), nullable=False)
    updated_on = Column(DateTime, nullable=False, server_default=func.now())
    
    manager = relationship("User")

class ProductSupplyRequest(Base):
    """Audit record of a warehouse replenishment request."""
    __tablename__ = 'product_supply_requests'
    
    request_number = Column(Integer, primary_key=True)
    manager_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    warehouse_id = Column(Integer, nullable=False)
    store_id = Column(Integer, ForeignKey('store.id'), nullable=False)
    product_name = Column(String(30), nullable=False)
    units_requested = Column(Integer, nullable=False)
    requested_on = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint('units_requested > 0', name='ck_supply_units_positive'),
    )
