# storefront_ops/access_control.py
"""
Role-based permission table for operator commands.

Each role has a menu mapping a numeric selector to an Operation. A command
may run only if its operation appears in the menu of the caller's role.
"""
import enum
from typing import Dict, List, Optional, Tuple

from storefront_ops.exceptions import UnauthorizedError
from storefront_ops.models import Role

class Operation(enum.Enum):
    # Anonymous
    CREATE_ACCOUNT = 'Create user'
    LOGIN = 'Log in'
    EXIT = '< EXIT'
    
    # Customer
    FIND_NEARBY_STORES = 'View Stores within 30 miles'
    LIST_STORE_PRODUCTS = 'View Product List'
    PLACE_ORDER = 'Place a Order'
    VIEW_OWN_RECENT_ORDERS = 'View 5 recent orders'
    
    # Manager
    LIST_OWNED_STORE_PRODUCTS = 'View Product List (owned store)'
    VIEW_ALL_RECENT_ORDERS = 'View 5 recent orders (all customers)'
    UPDATE_OWNED_PRODUCT = 'Update Product'
    VIEW_RECENT_UPDATES = 'View 5 recent Product Updates Info'
    VIEW_TOP_PRODUCTS = 'View 5 Popular Items'
    VIEW_TOP_CUSTOMERS = 'View 5 Popular Customers'
    REQUEST_SUPPLY = 'Place Product Supply Request to Warehouse'
    
    # Admin
    LIST_USERS = 'View All Users'
    UPDATE_USER = 'Update User Information'
    LIST_ALL_PRODUCTS = 'View All Products'
    UPDATE_ANY_PRODUCT = 'Update Product Information'
    
    LOGOUT = 'Log out'

ANONYMOUS_MENU: Dict[int, Operation] = {
    1: Operation.CREATE_ACCOUNT,
    2: Operation.LOGIN,
    9: Operation.EXIT,
}

ROLE_MENUS: Dict[Role, Dict[int, Operation]] = {
    Role.CUSTOMER: {
        1: Operation.FIND_NEARBY_STORES,
        2: Operation.LIST_STORE_PRODUCTS,
        3: Operation.PLACE_ORDER,
        4: Operation.VIEW_OWN_RECENT_ORDERS,
        20: Operation.LOGOUT,
    },
    Role.MANAGER: {
        1: Operation.LIST_OWNED_STORE_PRODUCTS,
        2: Operation.VIEW_ALL_RECENT_ORDERS,
        3: Operation.UPDATE_OWNED_PRODUCT,
        4: Operation.VIEW_RECENT_UPDATES,
        5: Operation.VIEW_TOP_PRODUCTS,
        6: Operation.VIEW_TOP_CUSTOMERS,
        7: Operation.REQUEST_SUPPLY,
        20: Operation.LOGOUT,
    },
    Role.ADMIN: {
        1: Operation.LIST_USERS,
        2: Operation.UPDATE_USER,
        3: Operation.LIST_ALL_PRODUCTS,
        4: Operation.UPDATE_ANY_PRODUCT,
        20: Operation.LOGOUT,
    },
}

def _check_menus():
    missing = [role for role in Role if role not in ROLE_MENUS]
    if missing:
        raise RuntimeError(f"No menu defined for roles: {', '.join(r.value for r in missing)}")
    for role, menu in ROLE_MENUS.items():
        if Operation.LOGOUT not in menu.values():
            raise RuntimeError(f"Menu for {role.value} has no logout entry")

_check_menus()

PERMISSIONS: Dict[Role, frozenset] = {
    role: frozenset(menu.values()) for role, menu in ROLE_MENUS.items()
}

def menu_for(role: Optional[Role]) -> List[Tuple[int, Operation]]:
    """Get the menu entries of a role (None for the anonymous state), sorted by selector."""
    menu = ANONYMOUS_MENU if role is None else ROLE_MENUS[role]
    return sorted(menu.items())

def resolve_operation(role: Optional[Role], selector) -> Operation:
    """Map an operator's menu choice to an operation.
    
    Args:
        role: Role of the logged-in user, or None when anonymous
        selector: Raw menu choice
        
    Returns:
        The selected Operation
        
    Raises:
        UnauthorizedError: If the choice is not a number or not on the role's menu
    """
    menu = ANONYMOUS_MENU if role is None else ROLE_MENUS[role]
    try:
        choice = int(str(selector).strip())
    except ValueError:
        raise UnauthorizedError(f"Unrecognized choice: {selector!r}")
    
    if choice not in menu:
        raise UnauthorizedError(f"Unrecognized choice: {choice}")
    return menu[choice]

def is_permitted(role: Optional[Role], operation: Operation) -> bool:
    if role is None:
        return operation in ANONYMOUS_MENU.values()
    return operation in PERMISSIONS[role]

def authorize(role: Optional[Role], operation: Operation) -> None:
    """Raise UnauthorizedError unless the role may perform the operation."""
    if not is_permitted(role, operation):
        who = role.value if role is not None else 'anonymous'
        raise UnauthorizedError(f"Operation '{operation.value}' is not permitted for {who} users")
