# orderflow/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Account that can sign in to the platform.

    Role:
      - "customer" | "store" | "driver"
      - fixed per account; copied into the access token at login.

    Passwords are stored as bcrypt hashes only.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    username: str = Field(
        max_length=50,
        unique=True,
        index=True,
        description="Login name",
    )

    password_hash: str = Field(
        description="bcrypt hash of the account password",
    )

    role: str = Field(
        index=True,
        description="Application role: customer | store | driver",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
