from .validation import (
    validate_name, validate_password, validate_coordinate,
    validate_non_negative_int, validate_positive_int, validate_price, optional
)
from .geo import Coordinate, calculate_distance, find_nearby
from .security import hash_password, verify_password

__all__ = [
    'validate_name',
    'validate_password',
    'validate_coordinate',
    'validate_non_negative_int',
    'validate_positive_int',
    'validate_price',
    'optional',
    'Coordinate',
    'calculate_distance',
    'find_nearby',
    'hash_password',
    'verify_password'
]
