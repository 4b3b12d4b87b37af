import argparse
import getpass
import sys

from storefront_ops.config import config
from storefront_ops.db import db, session_scope
from storefront_ops.exceptions import FatalStartupError, StorefrontError
from storefront_ops.logging_setup import logger, get_logger, log_exception

def init_application(connection_string=None):
    """Initialize application components.
    
    Raises:
        FatalStartupError: If the database cannot be reached
    """
    db.initialize(connection_string)
    
    log = logger.app_logger
    log.info("Storefront Operations initialized")
    if connection_string is None and not config.get('DATABASE', 'url'):
        log.info(f"Using database: {config.get('DATABASE', 'engine')} at {config.get('DATABASE', 'host')}:{config.get('DATABASE', 'port')}")
        log.info(f"Database name: {config.get('DATABASE', 'database')}")
    
    return True

def create_admin(name, password=None):
    """Create (or promote) an admin account.
    
    Returns:
        ID of the admin user
    """
    from storefront_ops.services.auth_service import AuthService
    
    if password is None:
        password = getpass.getpass(f"Password for admin {name}: ")
    
    with session_scope() as session:
        admin = AuthService(session).ensure_admin(name, password)
        admin_id = admin.id
    
    logger.app_logger.info(f"Admin account {admin_id} ({name}) is ready")
    return admin_id

def main(argv=None):
    """Main application entry point."""
    parser = argparse.ArgumentParser(description='Storefront Operations')
    parser.add_argument('--database-url',
                      help='Database URL (overrides config/settings.ini)')
    parser.add_argument('--setup-db', action='store_true',
                      help='Create the database schema before starting')
    parser.add_argument('--drop-db', action='store_true',
                      help='Drop existing tables before setup')
    parser.add_argument('--create-admin', metavar='NAME',
                      help='Create an admin account with this name and exit')
    
    args = parser.parse_args(argv)
    log = get_logger('app')
    
    try:
        init_application(args.database_url)
    except FatalStartupError as e:
        log.error(str(e))
        print(f"Error - {e.message}", file=sys.stderr)
        print("Make sure the database server is running and reachable", file=sys.stderr)
        return 1
    
    try:
        if args.setup_db or args.drop_db:
            from storefront_ops.scripts.setup_db import setup_database
            if not setup_database(args.drop_db):
                return 1
        
        if args.create_admin:
            create_admin(args.create_admin)
            return 0
        
        from storefront_ops.cli.menu import AccessControlRouter
        AccessControlRouter(db).run()
    except StorefrontError as e:
        log_exception('app', e, "Unrecoverable error")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted by operator")
    finally:
        print("Disconnecting from database...")
        db.dispose()
    
    log.info("Storefront Operations stopped")
    return 0

if __name__ == "__main__":
    sys.exit(main())
