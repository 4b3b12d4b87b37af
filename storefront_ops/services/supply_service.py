# storefront_ops/services/supply_service.py
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront_ops.config import config
from storefront_ops.db import commit
from storefront_ops.exceptions import NotStoreOwnerError, ProductNotFoundError
from storefront_ops.logging_setup import get_logger
from storefront_ops.models import Order, Product, ProductSupplyRequest, Store, User
from storefront_ops.services.store_service import StoreService
from storefront_ops.utils.validation import (
    validate_name, validate_non_negative_int, validate_positive_int
)

logger = get_logger('supply')

class SupplyService:
    """Service for warehouse supply requests and manager analytics."""
    
    def __init__(self, session: Session):
        """Initialize the supply service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.store_service = StoreService(session)
    
    def request_supply(self, manager_id: int, store_id, warehouse_id, product_name, units_needed) -> ProductSupplyRequest:
        """Log a supply request and add the requested units to stock.
        
        Both writes belong to one transaction: either the request row and the
        stock increment are committed together or neither is.
        
        Args:
            manager_id: Requesting manager
            store_id: Store receiving the supply; must be owned by the manager
            warehouse_id: Warehouse supplying the units
            product_name: Product to replenish
            units_needed: Units requested (> 0)
            
        Returns:
            The persisted supply request
        """
        managed = self.store_service.get_managed_stores(manager_id)
        if not managed:
            raise NotStoreOwnerError("You do not manage any stores")
        
        store_id = validate_non_negative_int(store_id, 'Store ID')
        if store_id not in {store.id for store in managed}:
            raise NotStoreOwnerError(f"You are not the manager of store {store_id}")
        
        product_name = validate_name(product_name, 'Product Name')
        units_needed = validate_positive_int(units_needed, 'Number of Units')
        warehouse_id = validate_non_negative_int(warehouse_id, 'Warehouse ID')
        
        request = ProductSupplyRequest(
            manager_id=manager_id,
            warehouse_id=warehouse_id,
            store_id=store_id,
            product_name=product_name,
            units_requested=units_needed
        )
        self.session.add(request)
        
        updated = (
            self.session.query(Product)
            .filter(Product.store_id == store_id, Product.product_name == product_name)
            .update(
                {Product.units_in_stock: Product.units_in_stock + units_needed},
                synchronize_session='fetch'
            )
        )
        if updated != 1:
            self.session.rollback()
            raise ProductNotFoundError(f"Product {product_name!r} not found in store {store_id}")
        
        commit(self.session, "place supply request")
        logger.info(
            f"Manager {manager_id} requested {units_needed} x {product_name!r} "
            f"from warehouse {warehouse_id} for store {store_id}"
        )
        return request
    
    def top_products(self, manager_id: int, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """Get the most ordered products across the manager's stores.
        
        Returns:
            List of (product name, order count) tuples, highest count first,
            ties broken by product name
        """
        if limit is None:
            limit = config.business_rules['top_limit']
        order_count = func.count(Order.order_number).label('order_count')
        
        rows = (
            self.session.query(Product.product_name, order_count)
            .join(Order, (Order.store_id == Product.store_id) & (Order.product_name == Product.product_name))
            .join(Store, Store.id == Product.store_id)
            .filter(Store.manager_id == manager_id)
            .group_by(Product.product_name)
            .order_by(order_count.desc(), Product.product_name.asc())
            .limit(limit)
            .all()
        )
        return [(name, count) for name, count in rows]
    
    def top_customers(self, manager_id: int, limit: Optional[int] = None) -> List[Tuple[int, str, int]]:
        """Get the customers with the most orders across the manager's stores.
        
        Returns:
            List of (customer ID, customer name, order count) tuples, highest
            count first, ties broken by customer ID
        """
        if limit is None:
            limit = config.business_rules['top_limit']
        order_count = func.count(Order.order_number).label('order_count')
        
        rows = (
            self.session.query(Order.customer_id, User.name, order_count)
            .join(Store, Store.id == Order.store_id)
            .join(User, User.id == Order.customer_id)
            .filter(Store.manager_id == manager_id)
            .group_by(Order.customer_id, User.name)
            .order_by(order_count.desc(), Order.customer_id.asc())
            .limit(limit)
            .all()
        )
        return [(customer_id, name, count) for customer_id, name, count in rows]
