# storefront_ops/utils/security.py
import hashlib
import hmac
import secrets

_ITERATIONS = 100_000

def hash_password(password: str) -> str:
    """Return a salted PBKDF2 digest in the form ``salt$hexdigest``."""
    salt = secrets.token_hex(8)
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('ascii'), _ITERATIONS)
    return f"{salt}${digest.hex()}"

def verify_password(password: str, stored: str) -> bool:
    """Check a plaintext password against a value produced by hash_password."""
    if not stored or '$' not in stored:
        return False
    salt, expected = stored.split('$', 1)
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('ascii'), _ITERATIONS)
    return hmac.compare_digest(digest.hex(), expected)
