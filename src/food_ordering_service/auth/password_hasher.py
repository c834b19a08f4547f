"""Credential hashing used by the user directory.

The directory never compares raw passwords itself. It asks a PasswordHasher
to produce the stored credential at registration time and to verify a login
attempt against it.
"""

from abc import ABC, abstractmethod

from passlib.context import CryptContext


class PasswordHasher(ABC):
    """Abstract base class for credential hashing strategies."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Produce the credential to store for a password.

        Args:
            password: Raw password supplied by the user

        Returns:
            str: Opaque stored credential
        """
        pass

    @abstractmethod
    def verify(self, password: str, stored: str) -> bool:
        """Check a login attempt against a stored credential.

        Args:
            password: Raw password supplied at login
            stored: Credential previously produced by hash()

        Returns:
            bool: True if the password matches, False otherwise
        """
        pass


class PasslibPasswordHasher(PasswordHasher):
    """Salted hashing through a passlib CryptContext (pbkdf2_sha256 by default)."""

    def __init__(self, schemes: list[str] | None = None) -> None:
        self.context = CryptContext(schemes=schemes or ["pbkdf2_sha256"], deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, stored: str) -> bool:
        try:
            return self.context.verify(password, stored)
        except ValueError:
            # stored value is not a hash this context recognizes
            return False


class PlaintextPasswordHasher(PasswordHasher):
    """Stores passwords as-is and compares by exact equality.

    Only meant for local demos where seed credentials must stay readable.
    """

    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return password == stored


def create_password_hasher(name: str) -> PasswordHasher:
    """Build a hasher from its configuration name.

    Args:
        name: "plaintext" or a passlib scheme name such as "pbkdf2_sha256"

    Returns:
        PasswordHasher: Configured hasher
    """
    if name.lower() == "plaintext":
        return PlaintextPasswordHasher()
    return PasslibPasswordHasher(schemes=[name.lower()])
