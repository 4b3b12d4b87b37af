class StorefrontError(Exception):
    """Base exception for Storefront Operations errors."""

    default_message = "An error occurred in the Storefront Operations system"
    default_code = None

    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }

        if self.code:
            error_dict['code'] = self.code

        if self.details:
            error_dict['details'] = self.details

        return error_dict


# Validation errors: malformed or out-of-range operator input.

class ValidationError(StorefrontError):
    """Exception raised for data validation errors."""
    default_message = "Validation error"
    default_code = 'VALIDATION_ERROR'


class EmptyInputError(ValidationError):
    default_message = "Input must not be empty"
    default_code = 'EMPTY_INPUT'


class WeakPasswordError(ValidationError):
    default_message = (
        "Password must be between 5-11 characters and must have one capital "
        "letter, one number, and one special character"
    )
    default_code = 'WEAK_PASSWORD'


class PasswordEqualsNameError(ValidationError):
    default_message = "Password should not be the same as the user name"
    default_code = 'PASSWORD_EQUALS_NAME'


class OutOfRangeError(ValidationError):
    default_message = "Value out of range"
    default_code = 'OUT_OF_RANGE'


class InvalidFormatError(ValidationError):
    default_message = "Invalid format"
    default_code = 'INVALID_FORMAT'


class DuplicateUserError(ValidationError):
    default_message = "This user already exists"
    default_code = 'DUPLICATE_USER'


class NoChangeRequestedError(ValidationError):
    default_message = "No updates to make"
    default_code = 'NO_CHANGE_REQUESTED'


class InsufficientStockError(ValidationError):
    default_message = "Insufficient stock for the product"
    default_code = 'INSUFFICIENT_STOCK'


# Authentication and authorization errors.

class AuthError(StorefrontError):
    """Exception raised for authentication and authorization failures."""
    default_message = "Authorization error"
    default_code = 'AUTH_ERROR'


class InvalidCredentialsError(AuthError):
    default_message = "Login failed"
    default_code = 'INVALID_CREDENTIALS'


class UnauthorizedError(AuthError):
    default_message = "Operation not permitted for the current user"
    default_code = 'UNAUTHORIZED'


class NotStoreOwnerError(AuthError):
    default_message = "You are not the manager of this store"
    default_code = 'NOT_STORE_OWNER'


# Lookups that found nothing.

class NotFoundError(StorefrontError):
    """Exception raised when a requested resource is not found."""
    default_message = "Resource not found"
    default_code = 'NOT_FOUND'


class StoreNotFoundError(NotFoundError):
    default_message = "Store does not exist"
    default_code = 'STORE_NOT_FOUND'


class ProductNotFoundError(NotFoundError):
    default_message = "Product not found in the specified store"
    default_code = 'PRODUCT_NOT_FOUND'


class UserNotFoundError(NotFoundError):
    default_message = "User does not exist"
    default_code = 'USER_NOT_FOUND'


# Storage failures.

class StorageError(StorefrontError):
    """Exception raised for database-related errors."""
    default_message = "Database error"
    default_code = 'STORAGE_ERROR'


class FatalStartupError(StorageError):
    """Exception raised when the database cannot be reached at startup."""
    default_message = "Unable to connect to the database"
    default_code = 'FATAL_STARTUP'
