# storefront_ops/services/order_service.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront_ops.config import config
from storefront_ops.db import commit
from storefront_ops.exceptions import ProductNotFoundError, InsufficientStockError
from storefront_ops.logging_setup import get_logger
from storefront_ops.models import Order, User
from storefront_ops.services.inventory_service import InventoryService
from storefront_ops.services.store_service import StoreService
from storefront_ops.utils.validation import (
    validate_name, validate_non_negative_int, validate_positive_int
)

logger = get_logger('orders')

class OrderService:
    """Service for placing and reviewing customer orders.
    
    Orders are recorded against the stock level read at placement time;
    placing an order does not change the product's units in stock.
    """
    
    def __init__(self, session: Session):
        """Initialize the order service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.store_service = StoreService(session)
        self.inventory_service = InventoryService(session)
    
    def place_order(self, customer_id: int, store_id, product_name, units) -> int:
        """Record an order after checking stock sufficiency.
        
        The product row is locked for the duration of the check and the
        insert, so the order never exceeds the stock seen at commit time.
        
        Args:
            customer_id: Ordering customer
            store_id: Store ID
            product_name: Product name
            units: Units ordered (> 0)
            
        Returns:
            Order number of the new order
        """
        store_id = validate_non_negative_int(store_id, 'Store ID')
        product_name = validate_name(product_name, 'Product Name')
        units = validate_positive_int(units, 'Number of Units')
        
        self.store_service.require_store(store_id)
        
        product = self.inventory_service.get_product(store_id, product_name, for_update=True)
        if product is None:
            raise ProductNotFoundError(f"Product {product_name!r} not found in store {store_id}")
        
        if units > product.units_in_stock:
            logger.warning(
                f"Customer {customer_id} ordered {units} of {product_name!r} in store {store_id}; "
                f"only {product.units_in_stock} in stock"
            )
            raise InsufficientStockError(
                f"Insufficient stock for {product_name!r}: {product.units_in_stock} available",
                details={'requested': units, 'available': product.units_in_stock}
            )
        
        order = Order(
            customer_id=customer_id,
            store_id=store_id,
            product_name=product_name,
            units_ordered=units
        )
        self.session.add(order)
        commit(self.session, "create order")
        
        logger.info(f"Order {order.order_number}: customer {customer_id}, {units} x {product_name!r}, store {store_id}")
        return order.order_number
    
    def list_recent_orders(self, customer_id: int, limit: Optional[int] = None) -> List[Order]:
        """Get a customer's most recent orders, newest first."""
        if limit is None:
            limit = config.business_rules['recent_limit']
        return (
            self.session.query(Order)
            .filter(Order.customer_id == customer_id)
            .order_by(Order.order_time.desc(), Order.order_number.desc())
            .limit(limit)
            .all()
        )
    
    def list_recent_orders_all_customers(self, limit: Optional[int] = None) -> List[Tuple[Order, str]]:
        """Get the most recent orders of all customers, newest first.
        
        Returns:
            List of (order, customer name) tuples
        """
        if limit is None:
            limit = config.business_rules['recent_limit']
        return (
            self.session.query(Order, User.name)
            .join(User, Order.customer_id == User.id)
            .order_by(Order.order_time.desc(), Order.order_number.desc())
            .limit(limit)
            .all()
        )
