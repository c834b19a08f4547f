"""User identity models."""

from enum import Enum

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Enumeration of user roles."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    USER = "USER"


class User(BaseModel):
    """A storefront user.

    ADMIN users double as delivery agents that orders get assigned to. The
    password field holds whatever the configured password hasher produced.
    """

    id: str = Field(..., description="Unique identifier for the user")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email, matched case-sensitively")
    phone: str = Field(default="", description="Contact phone number")
    password: str = Field(..., description="Stored credential", repr=False)
    role: Role = Field(default=Role.USER, description="Access role")
    assigned_restaurant_id: str | None = Field(
        None, description="Restaurant an ADMIN works for"
    )


class PublicUser(BaseModel):
    """User representation without the stored credential."""

    id: str
    name: str
    email: str
    phone: str
    role: Role
    assigned_restaurant_id: str | None = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        """Strip the credential from a User.

        Args:
            user: User to convert

        Returns:
            PublicUser: Safe-to-expose representation
        """
        return cls(**user.model_dump(exclude={"password"}))
