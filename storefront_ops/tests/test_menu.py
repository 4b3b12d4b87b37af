"""
Tests for the interactive router, driven by scripted operator input.
"""
import unittest
from unittest.mock import MagicMock

from storefront_ops.cli.menu import AccessControlRouter
from storefront_ops.db import db
from storefront_ops.exceptions import StorageError
from storefront_ops.models import Order, Product, ProductSupplyRequest, User, Role
from storefront_ops.tests.fixtures import add_user, add_store, add_product

def scripted(lines):
    """Return a read_line callable answering prompts from ``lines``."""
    answers = iter(lines)
    
    def read_line(prompt):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError
    return read_line

class TestAccessControlRouter(unittest.TestCase):
    
    def setUp(self):
        db.initialize('sqlite://')
        db.create_all_tables()
        self.output = []
        
        with db.session_scope() as session:
            manager = add_user(session, "mgr", role=Role.MANAGER)
            self.manager_id = manager.id
            add_user(session, "root", password="Adm1n$pw", role=Role.ADMIN)
            add_store(session, 5, latitude=20.0, longitude=20.0, manager=manager)
            add_store(session, 9, latitude=90.0, longitude=90.0)
            add_product(session, 5, "Widget", units=3, price=2.5)
    
    def tearDown(self):
        db.dispose()
    
    def router(self, *lines):
        return AccessControlRouter(db, read_line=scripted(lines), write=self.output.append)
    
    def text(self):
        return "\n".join(self.output)
    
    def test_customer_session(self):
        router = self.router(
            "1", "alice", "Passw0rd!", "10", "10",   # create user
            "2", "alice", "Passw0rd!",               # log in
            "1",                                     # stores nearby
            "3", "5", "Widget", "5",                 # too many units
            "3", "5", "Widget", "2",                 # order
            "4",                                     # recent orders
            "20",                                    # log out
            "9"                                      # exit
        )
        router.run()
        
        out = self.text()
        self.assertIn("User successfully created!", out)
        self.assertIn("Welcome, alice!", out)
        self.assertIn("Stores within 30 miles", out)
        self.assertIn("Error: Insufficient stock", out)
        self.assertRegex(out, r"Order \d+ successfully created!")
        self.assertIn("Bye !", out)
        self.assertIsNone(router.user_session)
        self.assertFalse(router.running)
        
        with db.session_scope() as session:
            orders = session.query(Order).all()
            self.assertEqual([o.units_ordered for o in orders], [2])
    
    def test_failed_login_stays_anonymous(self):
        router = self.router("2", "mgr", "wrong")
        router.run()
        self.assertIn("Error: Login failed", self.text())
        self.assertIsNone(router.user_session)
    
    def test_choice_outside_role_menu(self):
        router = self.router("mgr", "Passw0rd!")
        self.assertTrue(router.dispatch("2"))
        self.assertEqual(router.role, Role.MANAGER)
        
        self.assertFalse(router.dispatch("15"))
        self.assertIn("Error: Unrecognized choice: 15", self.output[-1])
    
    def test_manager_supply_request(self):
        router = self.router(
            "2", "mgr", "Passw0rd!",
            "7", "5", "Widget", "10", "3",
        )
        router.run()
        
        self.assertIn("Product supply request placed successfully.", self.text())
        with db.session_scope() as session:
            self.assertEqual(session.get(Product, (5, "Widget")).units_in_stock, 13)
            self.assertEqual(session.query(ProductSupplyRequest).count(), 1)
    
    def test_manager_cannot_touch_foreign_store(self):
        router = self.router(
            "2", "mgr", "Passw0rd!",
            "3", "9", "Widget", "1", "",
        )
        router.run()
        self.assertIn("Error: You are not the manager of store 9", self.text())
    
    def test_admin_updates_user(self):
        router = self.router(
            "2", "root", "Adm1n$pw",
            "2", str(self.manager_id), "", "", "44", "", "",
            "1",
        )
        router.run()
        
        self.assertIn("User information updated successfully!", self.text())
        with db.session_scope() as session:
            self.assertEqual(session.get(User, self.manager_id).latitude, 44.0)
    
    def test_oversized_store_id_is_reported(self):
        router = self.router(
            "2", "mgr", "Passw0rd!",
            "1", "99999999999999999999",
            "1", "5",
            "20",
            "9",
        )
        router.run()
        
        out = self.text()
        self.assertIn("Error: Invalid Store ID", out)
        self.assertIn("Widget", out)
        self.assertIn("Bye !", out)
    
    def test_storage_failure_does_not_end_session(self):
        database = MagicMock()
        database.session_scope.side_effect = [
            StorageError("Database operation failed: disk I/O error"),
            db.session_scope(),
        ]
        router = AccessControlRouter(
            database, read_line=scripted(["mgr", "Passw0rd!"]), write=self.output.append
        )
        
        self.assertFalse(router.dispatch("2"))
        self.assertEqual(self.output[-1], "Error: Database operation failed: disk I/O error")
        self.assertIsNone(router.user_session)
        
        self.assertTrue(router.dispatch("2"))
        self.assertEqual(router.role, Role.MANAGER)
        self.assertTrue(router.running)
    
    def test_menu_lists_role_operations(self):
        router = self.router()
        router.show_menu()
        self.assertIn("1. Create user", self.output[-1])
        self.assertIn("9. < EXIT", self.output[-1])

if __name__ == '__main__':
    unittest.main()
