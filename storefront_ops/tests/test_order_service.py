"""
Tests for placing orders and listing recent orders.
"""
import unittest

from storefront_ops.exceptions import (
    InsufficientStockError, ProductNotFoundError, StoreNotFoundError, InvalidFormatError
)
from storefront_ops.models import Order, Product, Role
from storefront_ops.services.order_service import OrderService
from storefront_ops.tests.fixtures import (
    DatabaseTestCase, add_user, add_store, add_product, add_order
)

class TestPlaceOrder(DatabaseTestCase, unittest.TestCase):
    
    def setUp(self):
        super().setUp()
        manager = add_user(self.session, "mgr", role=Role.MANAGER)
        self.customer = add_user(self.session, "cust")
        add_store(self.session, 5, manager=manager)
        add_product(self.session, 5, "Widget", units=3, price=2.0)
        self.service = OrderService(self.session)
    
    def test_order_exceeding_stock_is_rejected(self):
        with self.assertRaises(InsufficientStockError) as ctx:
            self.service.place_order(self.customer.id, 5, "Widget", 5)
        
        self.assertEqual(ctx.exception.details, {'requested': 5, 'available': 3})
        self.assertEqual(self.session.query(Order).count(), 0)
    
    def test_order_within_stock_is_recorded(self):
        order_number = self.service.place_order(self.customer.id, "5", "Widget", "2")
        
        order = self.session.get(Order, order_number)
        self.assertEqual(order.customer_id, self.customer.id)
        self.assertEqual(order.store_id, 5)
        self.assertEqual(order.product_name, "Widget")
        self.assertEqual(order.units_ordered, 2)
        self.assertIsNotNone(order.order_time)
    
    def test_order_of_exact_stock_allowed_and_stock_unchanged(self):
        self.service.place_order(self.customer.id, 5, "Widget", 3)
        self.session.expire_all()
        self.assertEqual(self.session.get(Product, (5, "Widget")).units_in_stock, 3)
    
    def test_zero_units_rejected(self):
        with self.assertRaises(InvalidFormatError):
            self.service.place_order(self.customer.id, 5, "Widget", "0")
    
    def test_unknown_store_and_product(self):
        with self.assertRaises(StoreNotFoundError):
            self.service.place_order(self.customer.id, 6, "Widget", 1)
        with self.assertRaises(ProductNotFoundError):
            self.service.place_order(self.customer.id, 5, "Gizmo", 1)

class TestRecentOrders(DatabaseTestCase, unittest.TestCase):
    
    def setUp(self):
        super().setUp()
        manager = add_user(self.session, "mgr", role=Role.MANAGER)
        self.alice = add_user(self.session, "alice")
        self.bob = add_user(self.session, "bob")
        add_store(self.session, 1, manager=manager)
        add_product(self.session, 1, "Widget", units=100)
        
        for units in range(1, 8):
            add_order(self.session, self.alice, 1, "Widget", units)
        add_order(self.session, self.bob, 1, "Widget", 50)
        self.service = OrderService(self.session)
    
    def test_customer_sees_own_five_newest(self):
        orders = self.service.list_recent_orders(self.alice.id)
        self.assertEqual([o.units_ordered for o in orders], [7, 6, 5, 4, 3])
        self.assertTrue(all(o.customer_id == self.alice.id for o in orders))
    
    def test_zero_limit_returns_nothing(self):
        self.assertEqual(self.service.list_recent_orders(self.alice.id, limit=0), [])
        self.assertEqual(self.service.list_recent_orders_all_customers(limit=0), [])
    
    def test_customer_without_orders(self):
        carol = add_user(self.session, "carol")
        self.assertEqual(self.service.list_recent_orders(carol.id), [])
    
    def test_all_customers_includes_names(self):
        orders = self.service.list_recent_orders_all_customers(limit=2)
        self.assertEqual(
            [(o.units_ordered, name) for o, name in orders],
            [(50, "bob"), (7, "alice")]
        )

if __name__ == '__main__':
    unittest.main()
