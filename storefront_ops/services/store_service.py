# storefront_ops/services/store_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront_ops.exceptions import StoreNotFoundError, UserNotFoundError, NotStoreOwnerError
from storefront_ops.models import Store, User
from storefront_ops.utils.geo import Coordinate, find_nearby

class StoreService:
    """Service for store lookups and the nearby-store search."""
    
    def __init__(self, session: Session):
        """Initialize the store service.
        
        Args:
            session: Database session
        """
        self.session = session
    
    def get_store(self, store_id: int) -> Optional[Store]:
        """Get a store by ID.
        
        Args:
            store_id: Store ID
            
        Returns:
            Store object or None if not found
        """
        return self.session.get(Store, store_id)
    
    def require_store(self, store_id: int) -> Store:
        """Get a store by ID or raise StoreNotFoundError."""
        store = self.get_store(store_id)
        if store is None:
            raise StoreNotFoundError(f"Store {store_id} does not exist")
        return store
    
    def require_owned_store(self, store_id: int, manager_id: int) -> Store:
        """Get a store the given manager owns.
        
        Raises:
            StoreNotFoundError: If the store does not exist
            NotStoreOwnerError: If the store belongs to another manager
        """
        store = self.require_store(store_id)
        if store.manager_id != manager_id:
            raise NotStoreOwnerError(f"You are not the manager of store {store_id}")
        return store
    
    def get_all_stores(self) -> List[Store]:
        """Get all stores ordered by ID."""
        return self.session.query(Store).order_by(Store.id).all()
    
    def get_managed_stores(self, manager_id: int) -> List[Store]:
        """Get the stores owned by a manager, ordered by ID."""
        return (
            self.session.query(Store)
            .filter(Store.manager_id == manager_id)
            .order_by(Store.id)
            .all()
        )
    
    def find_nearby_stores(self, user_id: int, radius: Optional[float] = None) -> List[Store]:
        """Find the stores within the search radius of a user's location.
        
        Args:
            user_id: User whose stored location is the origin
            radius: Optional radius override
            
        Returns:
            Stores within the radius, ordered by store ID
        """
        user = self.session.get(User, user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} does not exist")
        
        origin = Coordinate(user.latitude, user.longitude)
        return find_nearby(origin, self.get_all_stores(), radius)
