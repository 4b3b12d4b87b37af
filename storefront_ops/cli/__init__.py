from .menu import AccessControlRouter

__all__ = ['AccessControlRouter']
