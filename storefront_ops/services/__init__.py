from .auth_service import AuthService, UserSession
from .store_service import StoreService
from .inventory_service import InventoryService
from .order_service import OrderService
from .supply_service import SupplyService

__all__ = [
    'AuthService',
    'UserSession',
    'StoreService',
    'InventoryService',
    'OrderService',
    'SupplyService'
]
