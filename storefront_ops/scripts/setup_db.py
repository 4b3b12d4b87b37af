# storefront_ops/scripts/setup_db.py
import argparse
import sys

from storefront_ops.db import db
from storefront_ops.exceptions import StorefrontError
from storefront_ops.logging_setup import get_logger

logger = get_logger('db_setup')

def setup_database(drop_existing=False, connection_string=None):
    """Set up the database schema.
    
    Args:
        drop_existing: If True, drop existing tables before creating new ones
        connection_string: Optional database URL overriding the configuration
        
    Returns:
        True if setup was successful, False otherwise
    """
    try:
        if connection_string is not None or not db.is_initialized:
            db.initialize(connection_string)
        
        if drop_existing:
            logger.info("Dropping all existing tables...")
            db.drop_all_tables()
            logger.info("All tables dropped successfully.")
        
        logger.info("Creating database tables...")
        db.create_all_tables()
        logger.info("Database tables created successfully.")
        return True
    except StorefrontError as e:
        logger.error(f"Error setting up database: {str(e)}")
        return False

def main():
    parser = argparse.ArgumentParser(description='Create the Storefront Operations database tables')
    parser.add_argument('--drop', '-d', action='store_true', help='Drop existing tables before creating new ones')
    parser.add_argument('--database-url', help='Database URL (overrides config/settings.ini)')
    args = parser.parse_args()
    
    return 0 if setup_database(args.drop, args.database_url) else 1

if __name__ == "__main__":
    sys.exit(main())
