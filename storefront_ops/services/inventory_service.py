# storefront_ops/services/inventory_service.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront_ops.config import config
from storefront_ops.db import commit
from storefront_ops.exceptions import ProductNotFoundError, NoChangeRequestedError
from storefront_ops.logging_setup import get_logger
from storefront_ops.models import Product, ProductUpdate, User, Role
from storefront_ops.services.store_service import StoreService
from storefront_ops.utils.validation import (
    validate_name, validate_non_negative_int, validate_price, optional
)

logger = get_logger('inventory')

class InventoryService:
    """Service for product lookups and product updates.
    
    Every successful update performed by a manager leaves exactly one
    ProductUpdate audit row, written in the same transaction as the change.
    """
    
    def __init__(self, session: Session):
        """Initialize the inventory service.
        
        Args:
            session: Database session
        """
        self.session = session
        self.store_service = StoreService(session)
    
    def get_product(self, store_id: int, product_name: str, for_update: bool = False) -> Optional[Product]:
        """Get a product by its composite key.
        
        Args:
            store_id: Store ID
            product_name: Product name (exact match)
            for_update: Lock the row until the end of the transaction
            
        Returns:
            Product object or None if not found
        """
        query = self.session.query(Product).filter(
            Product.store_id == store_id,
            Product.product_name == product_name
        )
        if for_update:
            query = query.with_for_update()
        return query.first()
    
    def product_exists(self, store_id: int, product_name: str) -> bool:
        return self.get_product(store_id, product_name) is not None
    
    def check_stock(self, store_id: int, product_name: str) -> int:
        """Get the units in stock for a product.
        
        Raises:
            ProductNotFoundError: If the store does not carry the product
        """
        product = self.get_product(store_id, product_name)
        if product is None:
            raise ProductNotFoundError(f"Product {product_name!r} not found in store {store_id}")
        return product.units_in_stock
    
    def list_products(self, store_id, actor=None) -> List[Product]:
        """Get the products of a store.
        
        Args:
            store_id: Store ID
            actor: Optional UserSession; managers may only list stores they own
            
        Returns:
            List of products ordered by name
        """
        store_id = validate_non_negative_int(store_id, 'Store ID')
        if actor is not None and actor.role == Role.MANAGER:
            self.store_service.require_owned_store(store_id, actor.user_id)
        else:
            self.store_service.require_store(store_id)
        
        return (
            self.session.query(Product)
            .filter(Product.store_id == store_id)
            .order_by(Product.product_name)
            .all()
        )
    
    def list_all_products(self) -> List[Product]:
        """Get every product ordered by store ID ascending."""
        return (
            self.session.query(Product)
            .order_by(Product.store_id.asc(), Product.product_name.asc())
            .all()
        )
    
    def update_product(self, actor, store_id, product_name, new_units=None, new_price=None) -> Product:
        """Update the units and/or price of a product.
        
        Args:
            actor: UserSession of the operator; managers must own the store,
                admins skip the ownership check
            store_id: Store ID
            product_name: Product name
            new_units: New units in stock, or None/blank for no change
            new_price: New price per unit, or None/blank for no change
            
        Returns:
            The updated product
        """
        store_id = validate_non_negative_int(store_id, 'Store ID')
        product_name = validate_name(product_name, 'Product Name')
        units = optional(validate_non_negative_int, new_units, 'Number of Units')
        price = optional(validate_price, new_price)
        
        if actor.role == Role.ADMIN:
            self.store_service.require_store(store_id)
        else:
            self.store_service.require_owned_store(store_id, actor.user_id)
        
        product = self.get_product(store_id, product_name, for_update=True)
        if product is None:
            raise ProductNotFoundError(f"Product {product_name!r} not found in store {store_id}")
        
        if units is None and price is None:
            raise NoChangeRequestedError()
        
        if units is not None:
            product.units_in_stock = units
        if price is not None:
            product.price_per_unit = price
        
        if actor.role == Role.MANAGER:
            self.session.add(ProductUpdate(
                store_id=store_id,
                manager_id=actor.user_id,
                product_name=product_name
            ))
        
        commit(self.session, "update product")
        logger.info(
            f"User {actor.user_id} updated {product_name!r} in store {store_id}: "
            f"units={units}, price={price}"
        )
        return product
    
    def list_recent_updates(self, manager_id: int, limit: Optional[int] = None) -> List[Tuple[ProductUpdate, str]]:
        """Get a manager's most recent product updates, newest first.
        
        Returns:
            List of (update, manager name) tuples
        """
        if limit is None:
            limit = config.business_rules['recent_limit']
        
        return (
            self.session.query(ProductUpdate, User.name)
            .join(User, ProductUpdate.manager_id == User.id)
            .filter(ProductUpdate.manager_id == manager_id)
            .order_by(ProductUpdate.updated_on.desc(), ProductUpdate.update_number.desc())
            .limit(limit)
            .all()
        )
