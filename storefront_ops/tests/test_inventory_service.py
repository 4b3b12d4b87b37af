"""
Tests for product listing and product updates.
"""
import unittest

from storefront_ops.exceptions import (
    NotStoreOwnerError, StoreNotFoundError, ProductNotFoundError,
    NoChangeRequestedError, InvalidFormatError
)
from storefront_ops.models import Product, ProductUpdate, Role
from storefront_ops.services.inventory_service import InventoryService
from storefront_ops.tests.fixtures import (
    DatabaseTestCase, add_user, add_store, add_product, session_for
)

class TestInventoryService(DatabaseTestCase, unittest.TestCase):
    
    def setUp(self):
        super().setUp()
        self.manager = add_user(self.session, "mgr", role=Role.MANAGER)
        self.other_manager = add_user(self.session, "other", role=Role.MANAGER)
        self.admin = add_user(self.session, "root", role=Role.ADMIN)
        self.customer = add_user(self.session, "cust")
        
        add_store(self.session, 5, manager=self.manager)
        add_store(self.session, 7, manager=self.other_manager)
        add_product(self.session, 5, "Widget", units=3, price=2.5)
        add_product(self.session, 5, "Gadget", units=10, price=1.0)
        add_product(self.session, 7, "Widget", units=4, price=3.0)
        
        self.service = InventoryService(self.session)
    
    def _product(self, store_id, name):
        self.session.expire_all()
        return self.session.get(Product, (store_id, name))
    
    def test_list_products_sorted_by_name(self):
        products = self.service.list_products("5", actor=session_for(self.customer))
        self.assertEqual([p.product_name for p in products], ["Gadget", "Widget"])
    
    def test_list_products_unknown_store(self):
        with self.assertRaises(StoreNotFoundError):
            self.service.list_products(99)
    
    def test_manager_lists_only_owned_stores(self):
        with self.assertRaises(NotStoreOwnerError):
            self.service.list_products(7, actor=session_for(self.manager))
    
    def test_list_all_products_ordered_by_store(self):
        products = self.service.list_all_products()
        self.assertEqual(
            [(p.store_id, p.product_name) for p in products],
            [(5, "Gadget"), (5, "Widget"), (7, "Widget")]
        )
    
    def test_product_exists(self):
        self.assertTrue(self.service.product_exists(5, "Widget"))
        self.assertFalse(self.service.product_exists(5, "widget"))
        self.assertFalse(self.service.product_exists(7, "Gadget"))
        self.assertFalse(self.service.product_exists(99, "Widget"))
    
    def test_check_stock(self):
        self.assertEqual(self.service.check_stock(5, "Widget"), 3)
        with self.assertRaises(ProductNotFoundError):
            self.service.check_stock(5, "Gizmo")
    
    def test_manager_update_writes_audit_row(self):
        self.service.update_product(session_for(self.manager), "5", "Widget", "8", "4.75")
        
        product = self._product(5, "Widget")
        self.assertEqual(product.units_in_stock, 8)
        self.assertEqual(product.price_per_unit, 4.75)
        
        updates = self.session.query(ProductUpdate).all()
        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0].manager_id, self.manager.id)
        self.assertEqual(updates[0].store_id, 5)
        self.assertEqual(updates[0].product_name, "Widget")
    
    def test_blank_field_left_unchanged(self):
        self.service.update_product(session_for(self.manager), 5, "Widget", "", "9.99")
        product = self._product(5, "Widget")
        self.assertEqual(product.units_in_stock, 3)
        self.assertEqual(product.price_per_unit, 9.99)
    
    def test_manager_cannot_update_foreign_store(self):
        with self.assertRaises(NotStoreOwnerError):
            self.service.update_product(session_for(self.manager), 7, "Widget", "1", None)
        
        self.assertEqual(self._product(7, "Widget").units_in_stock, 4)
        self.assertEqual(self.session.query(ProductUpdate).count(), 0)
    
    def test_no_change_requested(self):
        with self.assertRaises(NoChangeRequestedError):
            self.service.update_product(session_for(self.manager), 5, "Widget", "", "")
        
        product = self._product(5, "Widget")
        self.assertEqual((product.units_in_stock, product.price_per_unit), (3, 2.5))
        self.assertEqual(self.session.query(ProductUpdate).count(), 0)
    
    def test_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            self.service.update_product(session_for(self.manager), 5, "Gizmo", "1", None)
    
    def test_invalid_price_format(self):
        with self.assertRaises(InvalidFormatError):
            self.service.update_product(session_for(self.manager), 5, "Widget", None, "1.234")
    
    def test_admin_updates_any_store_without_audit_row(self):
        self.service.update_product(session_for(self.admin), 7, "Widget", "0", None)
        
        self.assertEqual(self._product(7, "Widget").units_in_stock, 0)
        self.assertEqual(self.session.query(ProductUpdate).count(), 0)
    
    def test_recent_updates_newest_first_and_limited(self):
        actor = session_for(self.manager)
        for units in range(1, 8):
            self.service.update_product(actor, 5, "Gadget", str(units), None)
        
        updates = self.service.list_recent_updates(self.manager.id, limit=5)
        self.assertEqual(len(updates), 5)
        numbers = [u.update_number for u, _ in updates]
        self.assertEqual(numbers, sorted(numbers, reverse=True))
        self.assertTrue(all(name == "mgr" for _, name in updates))
        self.assertEqual(self.service.list_recent_updates(self.other_manager.id), [])
    
    def test_zero_limit_returns_nothing(self):
        self.service.update_product(session_for(self.manager), 5, "Gadget", "1", None)
        self.assertEqual(self.service.list_recent_updates(self.manager.id, limit=0), [])

if __name__ == '__main__':
    unittest.main()
