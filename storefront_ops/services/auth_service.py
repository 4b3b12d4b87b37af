# storefront_ops/services/auth_service.py
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront_ops.db import commit
from storefront_ops.exceptions import (
    DuplicateUserError, InvalidCredentialsError, UserNotFoundError,
    NoChangeRequestedError, ValidationError, InvalidFormatError
)
from storefront_ops.logging_setup import get_logger
from storefront_ops.models import User, Store, Role
from storefront_ops.utils.security import hash_password, verify_password
from storefront_ops.utils.validation import (
    validate_name, validate_password, validate_coordinate, optional
)

logger = get_logger('auth')

@dataclass(frozen=True)
class UserSession:
    """Identity of the logged-in operator, passed explicitly to every command."""
    user_id: int
    name: str
    role: Role

class AuthService:
    """Service for account creation, login and account maintenance."""
    
    def __init__(self, session: Session):
        """Initialize the auth service.
        
        Args:
            session: Database session
        """
        self.session = session
    
    def get_user(self, user_id: int) -> Optional[User]:
        """Get a user by ID, or None if not found."""
        return self.session.get(User, user_id)
    
    def require_user(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} does not exist")
        return user
    
    def find_by_credentials(self, name: str, password: str, exclude_id: Optional[int] = None) -> Optional[User]:
        """Find the user with exactly this name and password.
        
        Args:
            name: User name (case-sensitive)
            password: Plaintext password
            exclude_id: Optional user ID to ignore (the account being edited)
            
        Returns:
            Matching user or None
        """
        query = self.session.query(User).filter(User.name == name)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        
        for user in query.order_by(User.id).all():
            if verify_password(password, user.password):
                return user
        return None
    
    def create_account(self, name: str, password: str, latitude, longitude, role: Role = Role.CUSTOMER) -> User:
        """Create a new account.
        
        Args:
            name: User name
            password: Plaintext password
            latitude: Latitude in (0, 100)
            longitude: Longitude in (0, 100)
            role: Role of the new account (customers register themselves)
            
        Returns:
            The persisted user
        """
        name = validate_name(name)
        password = '' if password is None else str(password)
        
        if self.find_by_credentials(name, password) is not None:
            logger.warning(f"Rejected duplicate account for name {name!r}")
            raise DuplicateUserError()
        
        validate_password(password, name)
        lat = validate_coordinate(latitude, 'Latitude')
        lon = validate_coordinate(longitude, 'Longitude')
        
        user = User(
            name=name,
            password=hash_password(password),
            latitude=lat,
            longitude=lon,
            type=role
        )
        self.session.add(user)
        commit(self.session, "create user")
        
        logger.info(f"Created {role.value} account {user.id} ({name})")
        return user
    
    def login(self, name: str, password: str) -> UserSession:
        """Resolve credentials to a session.
        
        Raises:
            InvalidCredentialsError: If no account has this name and password
        """
        user = self.find_by_credentials(_strip(name), '' if password is None else str(password))
        if user is None:
            logger.warning(f"Failed login for name {name!r}")
            raise InvalidCredentialsError()
        
        logger.info(f"User {user.id} logged in as {user.type.value}")
        return UserSession(user_id=user.id, name=user.name, role=user.type)
    
    def logout(self, user_session: Optional[UserSession]) -> None:
        """End a session; the caller returns to the anonymous state."""
        if user_session is not None:
            logger.info(f"User {user_session.user_id} logged out")
        return None
    
    def list_users(self) -> List[User]:
        """Get all users ordered by ID."""
        return self.session.query(User).order_by(User.id.asc()).all()
    
    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        password: Optional[str] = None,
        latitude=None,
        longitude=None,
        role=None
    ) -> User:
        """Update the supplied fields of an account.
        
        Blank or None arguments mean "no change". The same duplicate, password
        and coordinate rules as account creation apply.
        
        Returns:
            The updated user
        """
        user = self.require_user(user_id)
        
        new_name = optional(validate_name, name)
        new_password = None if password is None or password == '' else str(password)
        new_lat = optional(validate_coordinate, latitude, 'Latitude')
        new_lon = optional(validate_coordinate, longitude, 'Longitude')
        new_role = self._parse_role(role)
        
        if all(v is None for v in (new_name, new_password, new_lat, new_lon, new_role)):
            raise NoChangeRequestedError()
        
        if new_password is not None:
            effective_name = new_name if new_name is not None else user.name
            validate_password(new_password, effective_name)
            if self.find_by_credentials(effective_name, new_password, exclude_id=user.id):
                raise DuplicateUserError()
        elif new_name is not None and new_name != user.name and self._name_taken(new_name, user.id):
            # Salted hashes are not comparable across accounts
            raise DuplicateUserError(
                f"Another account is named {new_name!r}; supply a new password to rename onto it"
            )
        
        if new_role is not None and new_role != Role.MANAGER and user.type == Role.MANAGER:
            owned = self.session.query(Store).filter(Store.manager_id == user.id).count()
            if owned:
                raise ValidationError(
                    f"User {user.id} still manages {owned} store(s) and must remain a manager"
                )
        
        if new_name is not None:
            user.name = new_name
        if new_password is not None:
            user.password = hash_password(new_password)
        if new_lat is not None:
            user.latitude = new_lat
        if new_lon is not None:
            user.longitude = new_lon
        if new_role is not None:
            user.type = new_role
        
        commit(self.session, "update user")
        logger.info(f"Updated account {user.id}")
        return user
    
    def ensure_admin(self, name: str, password: str, latitude=50.0, longitude=50.0) -> User:
        """Create an admin account unless one with these credentials exists."""
        existing = self.find_by_credentials(_strip(name), password)
        if existing is not None:
            if existing.type != Role.ADMIN:
                existing.type = Role.ADMIN
                commit(self.session, "promote admin")
            return existing
        return self.create_account(name, password, latitude, longitude, role=Role.ADMIN)
    
    def _name_taken(self, name: str, exclude_id: int) -> bool:
        query = self.session.query(User).filter(User.name == name, User.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def _parse_role(role) -> Optional[Role]:
        if role is None or isinstance(role, Role):
            return role
        if not str(role).strip():
            return None
        try:
            return Role.from_string(str(role))
        except ValueError as e:
            raise InvalidFormatError(str(e))

def _strip(value) -> str:
    return '' if value is None else str(value).strip()
