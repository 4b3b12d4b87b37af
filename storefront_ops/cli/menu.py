"""
Interactive operator menu.

The router is a small state machine: Anonymous (create user / log in / exit)
and Authenticated(role), where the selectable operations come from the
permission table in storefront_ops.access_control. Every command runs in its
own database transaction; any StorefrontError raised by a command is reported
to the operator and the menu is shown again.
"""
from typing import Callable, Optional

from tabulate import tabulate

from storefront_ops.access_control import Operation, menu_for, resolve_operation, authorize
from storefront_ops.db import db as default_db
from storefront_ops.exceptions import StorefrontError, UnauthorizedError, NotStoreOwnerError
from storefront_ops.logging_setup import logger as log_manager, get_logger
from storefront_ops.services import (
    AuthService, UserSession, StoreService, InventoryService, OrderService, SupplyService
)
from storefront_ops.utils.validation import validate_non_negative_int

logger = get_logger('router')

GREETING = (
    "\n\n*******************************************************\n"
    "              User Interface                           \n"
    "*******************************************************\n"
)

def _fmt_time(value) -> str:
    return value.strftime('%Y-%m-%d %H:%M:%S') if value is not None else ''

class AccessControlRouter:
    """Routes operator menu choices to services according to the caller's role."""
    
    def __init__(
        self,
        database=None,
        read_line: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None
    ):
        """Initialize the router.
        
        Args:
            database: Database providing session_scope() (defaults to the global one)
            read_line: Callable that prompts the operator and returns one line
            write: Callable that shows one block of text to the operator
        """
        self.database = database or default_db
        self.read_line = read_line or input
        self.write = write or print
        self.user_session: Optional[UserSession] = None
        self.running = True
        
        self._handlers = {
            Operation.CREATE_ACCOUNT: self._create_account,
            Operation.LOGIN: self._login,
            Operation.EXIT: self._exit,
            Operation.LOGOUT: self._logout,
            Operation.FIND_NEARBY_STORES: self._find_nearby_stores,
            Operation.LIST_STORE_PRODUCTS: self._list_store_products,
            Operation.LIST_OWNED_STORE_PRODUCTS: self._list_store_products,
            Operation.PLACE_ORDER: self._place_order,
            Operation.VIEW_OWN_RECENT_ORDERS: self._view_own_recent_orders,
            Operation.VIEW_ALL_RECENT_ORDERS: self._view_all_recent_orders,
            Operation.UPDATE_OWNED_PRODUCT: self._update_product,
            Operation.UPDATE_ANY_PRODUCT: self._update_product,
            Operation.VIEW_RECENT_UPDATES: self._view_recent_updates,
            Operation.VIEW_TOP_PRODUCTS: self._view_top_products,
            Operation.VIEW_TOP_CUSTOMERS: self._view_top_customers,
            Operation.REQUEST_SUPPLY: self._request_supply,
            Operation.LIST_USERS: self._list_users,
            Operation.UPDATE_USER: self._update_user,
            Operation.LIST_ALL_PRODUCTS: self._list_all_products,
        }
        unhandled = [op.name for op in Operation if op not in self._handlers]
        if unhandled:
            raise RuntimeError(f"Operations without a handler: {', '.join(unhandled)}")
    
    @property
    def role(self):
        return self.user_session.role if self.user_session else None
    
    def run(self) -> None:
        """Show menus and dispatch choices until the operator exits."""
        self.write(GREETING)
        while self.running:
            self.show_menu()
            try:
                choice = self.read_line("Please make your choice: ")
            except EOFError:
                self.running = False
                break
            self.dispatch(choice)
    
    def show_menu(self) -> None:
        lines = ["MAIN MENU", "---------"]
        for selector, operation in menu_for(self.role):
            if operation == Operation.LOGOUT:
                lines.append(".........................")
            lines.append(f"{selector}. {operation.value}")
        self.write("\n".join(lines))
    
    def dispatch(self, choice) -> bool:
        """Run the operation selected by ``choice`` for the current session.
        
        Returns:
            True if the command completed, False if it was rejected or failed
        """
        try:
            operation = resolve_operation(self.role, choice)
            authorize(self.role, operation)
        except UnauthorizedError as e:
            logger.warning(f"Rejected choice {choice!r} for {self.role or 'anonymous'}: {e.message}")
            self.write(f"Error: {e.message}")
            return False
        
        log_info = log_manager.command_start_log(operation.name, self.user_session)
        try:
            with self.database.session_scope() as session:
                self._handlers[operation](session)
        except EOFError:
            self.running = False
            return False
        except StorefrontError as e:
            log_manager.command_end_log(log_info, success=False, result_info=str(e))
            self.write(f"Error: {e.message}")
            return False
        
        log_manager.command_end_log(log_info, success=True)
        return True
    
    def _ask(self, prompt: str) -> str:
        return self.read_line(f"\t{prompt}: ")
    
    # -------- Anonymous --------
    
    def _create_account(self, session) -> None:
        name = self._ask("Enter name")
        password = self._ask("Enter password")
        latitude = self._ask("Enter latitude")
        longitude = self._ask("Enter longitude")
        AuthService(session).create_account(name, password, latitude, longitude)
        self.write("User successfully created!")
    
    def _login(self, session) -> None:
        name = self._ask("Enter name")
        password = self._ask("Enter password")
        self.user_session = AuthService(session).login(name, password)
        self.write(f"Welcome, {self.user_session.name}!")
    
    def _exit(self, session) -> None:
        self.running = False
        self.write("Bye !")
    
    def _logout(self, session) -> None:
        self.user_session = AuthService(session).logout(self.user_session)
    
    # -------- Customer --------
    
    def _find_nearby_stores(self, session) -> None:
        stores = StoreService(session).find_nearby_stores(self.user_session.user_id)
        if not stores:
            self.write("No stores found within 30 miles.")
            return
        rows = [[s.id, f"{s.latitude:.6f}", f"{s.longitude:.6f}"] for s in stores]
        self.write("Stores within 30 miles:\n" + tabulate(rows, headers=['Store ID', 'Latitude', 'Longitude']))
    
    def _list_store_products(self, session) -> None:
        store_id = self._ask("Enter Store ID")
        products = InventoryService(session).list_products(store_id, actor=self.user_session)
        if not products:
            self.write("No products found for this store.")
            return
        rows = [[p.product_name, p.units_in_stock, f"{p.price_per_unit:.2f}"] for p in products]
        self.write(tabulate(rows, headers=['Product Name', 'Units', 'Price Per Unit']))
    
    def _place_order(self, session) -> None:
        store_id = self._ask("Enter Store ID")
        product_name = self._ask("Enter Product Name")
        units = self._ask("Enter Number of Units")
        order_number = OrderService(session).place_order(
            self.user_session.user_id, store_id, product_name, units
        )
        self.write(f"Order {order_number} successfully created!")
    
    def _view_own_recent_orders(self, session) -> None:
        orders = OrderService(session).list_recent_orders(self.user_session.user_id)
        if not orders:
            self.write("No recent orders found.")
            return
        rows = [[o.store_id, o.product_name, o.units_ordered, _fmt_time(o.order_time)] for o in orders]
        self.write(tabulate(rows, headers=['Store ID', 'Product Name', 'Units Ordered', 'Order Time']))
    
    # -------- Manager --------
    
    def _view_all_recent_orders(self, session) -> None:
        orders = OrderService(session).list_recent_orders_all_customers()
        if not orders:
            self.write("No recent orders found.")
            return
        rows = [
            [o.order_number, name, o.store_id, o.product_name, o.units_ordered, _fmt_time(o.order_time)]
            for o, name in orders
        ]
        self.write(tabulate(rows, headers=[
            'Order Number', 'Customer Name', 'Store ID', 'Product Name', 'Units Ordered', 'Order Time'
        ]))
    
    def _update_product(self, session) -> None:
        store_id = self._ask("Enter Store ID")
        product_name = self._ask("Enter Product Name")
        new_units = self._ask("Enter New Number of Units (leave empty if no change)")
        new_price = self._ask("Enter New Price Per Unit (leave empty if no change)")
        InventoryService(session).update_product(
            self.user_session, store_id, product_name, new_units, new_price
        )
        self.write("Product information updated successfully!")
    
    def _view_recent_updates(self, session) -> None:
        updates = InventoryService(session).list_recent_updates(self.user_session.user_id)
        if not updates:
            self.write("No recent updates found.")
            return
        rows = [
            [u.update_number, u.store_id, name, u.product_name, _fmt_time(u.updated_on)]
            for u, name in updates
        ]
        self.write(tabulate(rows, headers=['Update Number', 'Store ID', 'Manager Name', 'Product Name', 'Updated On']))
    
    def _view_top_products(self, session) -> None:
        rows = SupplyService(session).top_products(self.user_session.user_id)
        if not rows:
            self.write("No orders found for your stores.")
            return
        self.write(tabulate(rows, headers=['Product Name', 'Order Count']))
    
    def _view_top_customers(self, session) -> None:
        rows = SupplyService(session).top_customers(self.user_session.user_id)
        if not rows:
            self.write("No orders found for your stores.")
            return
        self.write(tabulate(rows, headers=['Customer ID', 'Customer Name', 'Order Count']))
    
    def _request_supply(self, session) -> None:
        supply_service = SupplyService(session)
        stores = supply_service.store_service.get_managed_stores(self.user_session.user_id)
        if not stores:
            raise NotStoreOwnerError("You do not manage any stores")
        self.write("Stores you manage: " + ", ".join(str(s.id) for s in stores))
        store_id = self._ask("Enter Store ID")
        product_name = self._ask("Enter Product Name")
        units = self._ask("Enter number of units needed")
        warehouse_id = self._ask("Enter Warehouse ID")
        supply_service.request_supply(
            self.user_session.user_id, store_id, warehouse_id, product_name, units
        )
        self.write("Product supply request placed successfully.")
    
    # -------- Admin --------
    
    def _list_users(self, session) -> None:
        users = AuthService(session).list_users()
        rows = [[u.id, u.name, u.latitude, u.longitude, u.type.value] for u in users]
        self.write(tabulate(rows, headers=['User ID', 'Name', 'Latitude', 'Longitude', 'Type']))
    
    def _update_user(self, session) -> None:
        user_id = self._ask("Enter User ID")
        name = self._ask("Enter new name (leave empty if no change)")
        password = self._ask("Enter new password (leave empty if no change)")
        latitude = self._ask("Enter new latitude (leave empty if no change)")
        longitude = self._ask("Enter new longitude (leave empty if no change)")
        role = self._ask("Enter new type (customer, manager, admin; leave empty if no change)")
        
        AuthService(session).update_user(
            validate_non_negative_int(user_id, 'User ID'), name, password, latitude, longitude, role
        )
        self.write("User information updated successfully!")
    
    def _list_all_products(self, session) -> None:
        products = InventoryService(session).list_all_products()
        if not products:
            self.write("No products found.")
            return
        rows = [[p.store_id, p.product_name, p.units_in_stock, f"{p.price_per_unit:.2f}"] for p in products]
        self.write(tabulate(rows, headers=['Store ID', 'Product Name', 'Units', 'Price Per Unit']))
