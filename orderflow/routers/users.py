# orderflow/routers/users.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from orderflow.database import get_session
from orderflow.repositories.user_repo import UserRepository
from orderflow.schemas.user import LoginRequest, LoginResponse
from orderflow.services.user_service import AuthService

router = APIRouter(tags=["Auth"])

repo = UserRepository()
service = AuthService(repo)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange username/password for a bearer token.

    - 401 on unknown username or wrong password.
    - Token is valid for ACCESS_TOKEN_EXPIRE_HOURS (24h by default).
    """
    return service.login(session, payload.username, payload.password)
