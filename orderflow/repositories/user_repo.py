# orderflow/repositories/user_repo.py
from sqlmodel import Session, select

from orderflow.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (queries + inserts)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_username(self, session: Session, username: str) -> User | None:
        """Return a User by unique username, or None if not found."""
        stmt = select(User).where(User.username == username)
        return session.exec(stmt).first()

    def usernames_for(self, session: Session, user_ids: set[int]) -> dict[int, str]:
        """Map user id -> username for the given ids (one query)."""
        if not user_ids:
            return {}
        stmt = select(User.id, User.username).where(User.id.in_(user_ids))
        return {user_id: username for user_id, username in session.exec(stmt).all()}

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
