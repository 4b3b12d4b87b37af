from .config import config
from .db import db, session_scope
from .logging_setup import logger, get_logger
from .exceptions import (
    StorefrontError, ValidationError, AuthError, NotFoundError, StorageError, FatalStartupError
)

__all__ = [
    'config',
    'db',
    'session_scope',
    'logger',
    'get_logger',
    'StorefrontError',
    'ValidationError',
    'AuthError',
    'NotFoundError',
    'StorageError',
    'FatalStartupError'
]

__version__ = '1.0.0'
