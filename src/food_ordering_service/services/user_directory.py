"""User directory: identities, roles and credential checks."""

import logging
import uuid

from food_ordering_service.auth.password_hasher import PasswordHasher
from food_ordering_service.errors import UserNotFound, WrongPassword
from food_ordering_service.models.user_models import Role, User
from food_ordering_service.observability.decorators import traced
from food_ordering_service.observability.metrics import record_login_attempt
from food_ordering_service.repositories.memory_repositories import UserRepository

logger = logging.getLogger(__name__)


class UserDirectory:
    """Service for user lookup, signup and owner-side user management.

    The directory does not protect the OWNER account from removal. Callers
    exposing removal to end users must refuse to remove a user whose role is
    OWNER.
    """

    def __init__(self, user_repository: UserRepository, password_hasher: PasswordHasher) -> None:
        """Initialize the UserDirectory.

        Args:
            user_repository: Repository holding user records
            password_hasher: Strategy used to store and verify credentials
        """
        self.user_repository = user_repository
        self.password_hasher = password_hasher

    @traced("authenticate_user")
    def authenticate(self, email: str, password: str) -> User:
        """Authenticate a user by email and password.

        Args:
            email: Login email (exact, case-sensitive match)
            password: Raw password

        Returns:
            User: The matched user

        Raises:
            UserNotFound: If no user has this email
            WrongPassword: If the email matches but the password does not
        """
        user = self.user_repository.find_by_email(email)
        if user is None:
            logger.info(f"Login rejected, unknown email {email}")
            record_login_attempt(success=False, reason="user_not_found")
            raise UserNotFound()

        if not self.password_hasher.verify(password, user.password):
            logger.info(f"Login rejected, wrong password for user {user.id}")
            record_login_attempt(success=False, reason="wrong_password")
            raise WrongPassword()

        record_login_attempt(success=True)
        return user

    def register(self, name: str, email: str, password: str, phone: str) -> User:
        """Create a new customer account.

        Signup always succeeds and always yields role USER. Signing the new
        user in is the session's job.

        Args:
            name: Display name
            email: Login email
            password: Raw password
            phone: Contact phone number

        Returns:
            User: The newly created user
        """
        user = User(
            id=f"usr_{uuid.uuid4().hex[:12]}",
            name=name,
            email=email,
            phone=phone,
            password=self.password_hasher.hash(password),
            role=Role.USER,
        )
        self.user_repository.save_user(user)
        logger.info(f"Registered user {user.id}")
        return user

    def add_user(
        self,
        name: str,
        email: str,
        password: str,
        role: Role,
        phone: str = "",
        assigned_restaurant_id: str | None = None,
        user_id: str | None = None,
    ) -> User:
        """Create a user with any role on behalf of the owner.

        Args:
            name: Display name
            email: Login email
            password: Raw password
            role: Role to grant
            phone: Contact phone number
            assigned_restaurant_id: Restaurant an ADMIN works for
            user_id: Explicit identifier, generated when omitted

        Returns:
            User: The stored user
        """
        user = User(
            id=user_id or f"usr_{uuid.uuid4().hex[:12]}",
            name=name,
            email=email,
            phone=phone,
            password=self.password_hasher.hash(password),
            role=role,
            assigned_restaurant_id=assigned_restaurant_id,
        )
        self.user_repository.save_user(user)
        logger.info(f"Added user {user.id} with role {role.value}")
        return user

    def remove_user(self, user_id: str) -> bool:
        """Remove a user.

        Args:
            user_id: User identifier

        Returns:
            bool: True if removed, False if no such user
        """
        removed = self.user_repository.delete_user(user_id)
        if removed:
            logger.info(f"Removed user {user_id}")
        return removed

    def get_user(self, user_id: str) -> User | None:
        return self.user_repository.get_user(user_id)

    def list_users(self) -> list[User]:
        return self.user_repository.list_users()

    def list_agents(self) -> list[User]:
        """List the ADMIN users that orders can be assigned to."""
        return [u for u in self.user_repository.list_users() if u.role == Role.ADMIN]
