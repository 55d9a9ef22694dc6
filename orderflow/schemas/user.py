# orderflow/schemas/user.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from orderflow.core.lifecycle import Role


class Actor(SQLModel):
    """
    Authenticated caller, decoded from the bearer token.

    Passed explicitly into every service call; there is no
    process-wide session state.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    role: Role


class LoginRequest(SQLModel):
    """
    Credentials posted to /login.
    """

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class UserRead(SQLModel):
    id: int
    username: str
    role: Role


class LoginResponse(SQLModel):
    """
    Access token plus the public profile of the signed-in user.
    """

    token: str
    user: UserRead
