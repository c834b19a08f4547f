"""Session state for one storefront visitor.

A session carries the signed-in user and that visitor's cart. Services take
the session explicitly instead of reading ambient state.
"""

import logging
import uuid
from dataclasses import dataclass, field

from food_ordering_service.models.catalog_models import MenuItem
from food_ordering_service.models.order_models import CartItem, Size
from food_ordering_service.models.user_models import User
from food_ordering_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


@dataclass
class PendingRestaurantSwitch:
    """An add-to-cart waiting for the customer to confirm clearing the cart.

    Attributes:
        item: Menu item the customer tried to add
        size: Requested portion size
        note: Kitchen note for the line
        current_restaurant_id: Restaurant the cart currently belongs to
    """

    item: MenuItem
    size: Size
    note: str
    current_restaurant_id: str


@dataclass
class Session:
    """One visitor's state.

    Attributes:
        token: Opaque session identifier
        user: Signed-in user, None while anonymous
        cart: Cart lines, all from the same restaurant
        pending_switch: Add-to-cart parked until the customer confirms or cancels
    """

    token: str
    user: User | None = None
    cart: list[CartItem] = field(default_factory=list)
    pending_switch: PendingRestaurantSwitch | None = None

    @property
    def cart_restaurant_id(self) -> str | None:
        """Restaurant the cart belongs to, None when the cart is empty."""
        return self.cart[0].restaurant_id if self.cart else None


class SessionManager:
    """Creates sessions and moves them between anonymous and signed-in.

    At most max_sessions sessions are held; starting one more evicts the
    oldest. Logging out ends the session.
    """

    def __init__(self, user_directory: UserDirectory, max_sessions: int = 10000) -> None:
        """Initialize the SessionManager.

        Args:
            user_directory: Directory used for login and signup
            max_sessions: Number of live sessions kept before the oldest is evicted
        """
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.user_directory = user_directory
        self.max_sessions = max_sessions
        self._sessions: dict[str, Session] = {}

    def start_session(self) -> Session:
        while len(self._sessions) >= self.max_sessions:
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]
            logger.info(f"Evicted session {oldest[:8]}")
        session = Session(token=uuid.uuid4().hex)
        self._sessions[session.token] = session
        return session

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def get_session(self, token: str) -> Session | None:
        return self._sessions.get(token)

    def end_session(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def login(self, session: Session, email: str, password: str) -> User:
        """Authenticate and attach the user to the session.

        The session is left untouched when authentication fails.

        Raises:
            UserNotFound: If no user has this email
            WrongPassword: If the password does not match
        """
        user = self.user_directory.authenticate(email, password)
        session.user = user
        logger.info(f"Session {session.token[:8]} signed in as {user.id}")
        return user

    def signup(self, session: Session, name: str, email: str, password: str, phone: str) -> User:
        """Register a customer and sign them into the session."""
        user = self.user_directory.register(name, email, password, phone)
        session.user = user
        return user

    def logout(self, session: Session) -> None:
        """Sign out, empty the cart and end the session.

        The token stops resolving; the visitor starts a new session to keep browsing.
        """
        if session.user is not None:
            logger.info(f"Session {session.token[:8]} signed out {session.user.id}")
        session.user = None
        session.cart.clear()
        session.pending_switch = None
        self.end_session(session.token)
