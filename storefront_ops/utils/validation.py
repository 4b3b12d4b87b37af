# storefront_ops/utils/validation.py
import math
import re
from typing import Optional

from storefront_ops.config import config
from storefront_ops.exceptions import (
    EmptyInputError, WeakPasswordError, PasswordEqualsNameError,
    OutOfRangeError, InvalidFormatError
)

_DIGITS = re.compile(r'[0-9]+')
_DIGIT = re.compile(r'[0-9]')
_PRICE = re.compile(r'[0-9]+(\.[0-9]{1,2})?')
_SPECIAL = re.compile(r'[^A-Za-z0-9]')

MAX_INT = 2 ** 31 - 1

def _text(value) -> str:
    return '' if value is None else str(value).strip()

def validate_name(value, label: str = 'Name') -> str:
    """Validate a free-text name.
    
    Args:
        value: Raw input
        label: Field label used in the error message
        
    Returns:
        The stripped name
    """
    name = _text(value)
    if not name:
        raise EmptyInputError(f"{label} must not be empty")
    return name

def validate_password(password: str, name: Optional[str] = None) -> str:
    """Validate password strength.
    
    The password must not equal the associated user name and must be 5-11
    characters long with an uppercase letter, a digit and a character
    outside [A-Za-z0-9].
    
    Args:
        password: Password to check (not stripped)
        name: Associated user name, if known
        
    Returns:
        The password
    """
    password = '' if password is None else str(password)
    if name is not None and password == name:
        raise PasswordEqualsNameError()
    
    rules = config.business_rules
    has_upper = password != password.lower()
    has_digit = _DIGIT.search(password) is not None
    has_special = _SPECIAL.search(password) is not None
    
    if not (rules['password_min_length'] <= len(password) <= rules['password_max_length']) \
            or not has_upper or not has_digit or not has_special:
        raise WeakPasswordError()
    return password

def validate_coordinate(value, label: str = 'Coordinate') -> float:
    """Validate a latitude or longitude; bounds are exclusive on both ends.
    
    Args:
        value: Raw input (string or number)
        label: Field label used in the error message
        
    Returns:
        Parsed coordinate
    """
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise EmptyInputError(f"{label} must not be empty")
    try:
        coordinate = float(value)
    except (TypeError, ValueError):
        raise InvalidFormatError(f"{label} must be a number")
    
    if math.isnan(coordinate):
        raise InvalidFormatError(f"{label} must be a number")
    if not 0.0 < coordinate < 100.0:
        raise OutOfRangeError(f"{label} must be between 0.0 and 100.0")
    return coordinate

def validate_non_negative_int(value, label: str = 'Value') -> int:
    """Validate a whole number in [0, MAX_INT] given as digits.
    
    Values above MAX_INT do not fit an INTEGER column and are rejected here
    instead of reaching the driver.
    """
    if isinstance(value, bool):
        raise InvalidFormatError(f"Invalid {label}")
    if isinstance(value, int):
        number = value
    else:
        raw = _text(value)
        if not raw:
            raise EmptyInputError(f"{label} must not be empty")
        if not _DIGITS.fullmatch(raw):
            raise InvalidFormatError(f"Invalid {label}")
        number = int(raw)
    
    if not 0 <= number <= MAX_INT:
        raise InvalidFormatError(f"Invalid {label}")
    return number

def validate_positive_int(value, label: str = 'Value') -> int:
    """Validate a whole number >= 1 given as digits."""
    number = validate_non_negative_int(value, label)
    if number < 1:
        raise InvalidFormatError(f"Invalid {label}")
    return number

def validate_price(value, label: str = 'Price Per Unit') -> float:
    """Validate a non-negative decimal price with at most two fractional digits."""
    if isinstance(value, bool):
        raise InvalidFormatError(f"Invalid {label}")
    raw = _text(value) if isinstance(value, str) or value is None else repr(value)
    if not raw:
        raise EmptyInputError(f"{label} must not be empty")
    if not _PRICE.fullmatch(raw):
        raise InvalidFormatError(f"Invalid {label}")
    return round(float(raw), 2)

def optional(validator, value, *args, **kwargs):
    """Apply a validator unless the input is blank ("leave empty if no change").
    
    Returns:
        The validated value, or None for blank input
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return validator(value, *args, **kwargs)
