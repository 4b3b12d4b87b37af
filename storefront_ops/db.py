from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, scoped_session, Session
from sqlalchemy.pool import StaticPool

from storefront_ops.config import config
from storefront_ops.exceptions import StorageError, FatalStartupError, StorefrontError
from storefront_ops.logging_setup import get_logger

logger = get_logger('db')

class Database:
    """Database connection manager for the Storefront Operations system."""
    
    _instance = None
    
    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super(Database, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance
    
    def __init__(self):
        """Initialize the database connection if not already initialized."""
        if self._initialized:
            return
        
        self._engine = None
        self._session_factory = None
        self._session = None
        self._initialized = True
    
    def initialize(self, connection_string=None):
        """Initialize database connection and verify it can be reached.
        
        Args:
            connection_string: Optional database connection string.
                              If not provided, will use configuration.
                              
        Raises:
            FatalStartupError: If the database cannot be reached
        """
        if connection_string is None:
            connection_string = config.get_db_url()
        
        echo = config.get_boolean('DATABASE', 'echo', False)
        
        try:
            url = make_url(connection_string)
            if url.get_backend_name() == 'sqlite':
                engine_kwargs = {'connect_args': {'check_same_thread': False}}
                if url.database in (None, '', ':memory:'):
                    # One shared connection, otherwise every session gets its own empty database
                    engine_kwargs['poolclass'] = StaticPool
            else:
                engine_kwargs = dict(config.pool_config)
            
            self._engine = create_engine(connection_string, echo=echo, **engine_kwargs)
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
            self._session = scoped_session(self._session_factory)
            
            # Test connection
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except (SQLAlchemyError, ImportError, ValueError) as e:
            self._engine = None
            self._session = None
            raise FatalStartupError(f"Unable to connect to database: {str(e)}") from e
        
        logger.info(f"Connected to {url.get_backend_name()} database {url.database}")
    
    def create_all_tables(self):
        """Create all tables defined in the models."""
        from storefront_ops.models import Base
        Base.metadata.create_all(self.engine)
    
    def drop_all_tables(self):
        """Drop all tables from the database."""
        from storefront_ops.models import Base
        Base.metadata.drop_all(self.engine)
    
    @property
    def is_initialized(self):
        return self._engine is not None
    
    @property
    def session(self):
        """Get the current database session."""
        if self._session is None:
            self.initialize()
        return self._session
    
    @property
    def engine(self):
        """Get the database engine."""
        if self._engine is None:
            self.initialize()
        return self._engine
    
    @contextmanager
    def session_scope(self):
        """Provide a transactional scope around a series of operations.
        
        Business errors propagate unchanged after the rollback; driver
        failures are reported as StorageError.
        """
        session = self.session()
        try:
            yield session
            session.commit()
        except StorefrontError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Transaction rolled back: {str(e)}")
            raise StorageError(f"Database operation failed: {str(e)}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            self.session.remove()
    
    def dispose(self):
        """Release the engine and all pooled connections."""
        if self._session is not None:
            self._session.remove()
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._session = None

class QueryExecutor:
    """Parameterised SQL access on top of a session.
    
    Every statement is sent through ``text()`` with bound parameters; values
    supplied by the operator are never spliced into the SQL string.
    """
    
    def __init__(self, session: Session):
        """Initialize the executor.
        
        Args:
            session: Database session
        """
        self.session = session
    
    def execute(self, statement: str, params: Optional[Dict[str, Any]] = None) -> int:
        """Run a data-modifying statement.
        
        Returns:
            Number of affected rows
        """
        try:
            result = self.session.execute(text(statement), params or {})
        except SQLAlchemyError as e:
            raise StorageError(f"Statement failed: {str(e)}") from e
        return result.rowcount
    
    def query(self, statement: str, params: Optional[Dict[str, Any]] = None) -> List[List[Optional[str]]]:
        """Run a query and return its rows with every value rendered as text."""
        try:
            result = self.session.execute(text(statement), params or {})
            rows = result.fetchall()
        except SQLAlchemyError as e:
            raise StorageError(f"Query failed: {str(e)}") from e
        return [[None if value is None else str(value) for value in row] for row in rows]
    
    def query_count(self, statement: str, params: Optional[Dict[str, Any]] = None) -> int:
        """Run a query and return the number of rows it produced."""
        return len(self.query(statement, params))

def commit(session: Session, action: str) -> None:
    """Commit the session, rolling back and raising StorageError on failure.
    
    Args:
        session: Database session
        action: Short description used in the error message
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageError(f"Failed to {action}: {str(e)}") from e

# Global database instance
db = Database()

@contextmanager
def session_scope():
    """Session scope context manager."""
    with db.session_scope() as session:
        yield session
