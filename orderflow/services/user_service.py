# orderflow/services/user_service.py
import logging

from sqlmodel import Session

from orderflow.core.auth import create_access_token, verify_password
from orderflow.core.errors import AuthenticationError
from orderflow.repositories.user_repo import UserRepository
from orderflow.schemas.user import LoginResponse, UserRead

logger = logging.getLogger(__name__)


class AuthService:
    """
    Credential check and token issuance.

    Unknown usernames and wrong passwords are reported identically.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def login(self, session: Session, username: str, password: str) -> LoginResponse:
        user = self.repo.get_by_username(session, username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for username=%r", username)
            raise AuthenticationError("Invalid credentials")

        token = create_access_token(user)
        logger.info("User %s (%s) signed in", user.id, user.role)
        return LoginResponse(
            token=token,
            user=UserRead(id=user.id, username=user.username, role=user.role),
        )
