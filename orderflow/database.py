# orderflow/database.py
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from orderflow.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Connection setup
#
# - PostgreSQL: optional sslmode appended from DATABASE_SSLMODE,
#   pool_pre_ping=True to validate pooled connections.
# - SQLite (local dev / tests): check_same_thread=False because
#   FastAPI runs sync endpoints in a thread pool.
# ---------------------------------------------------------


def build_database_url(raw_url: str, sslmode: str | None = None) -> str:
    """
    Append sslmode to PostgreSQL URLs when configured and not already present.
    """
    if not sslmode or not raw_url.startswith("postgresql"):
        return raw_url
    if "sslmode=" in raw_url:
        return raw_url
    separator = "&" if "?" in raw_url else "?"
    return f"{raw_url}{separator}sslmode={sslmode}"


def make_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine with driver-appropriate connection arguments.
    """
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = make_engine(
    build_database_url(settings.DATABASE_URL, settings.DATABASE_SSLMODE),
    echo=settings.DB_ECHO,
)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
