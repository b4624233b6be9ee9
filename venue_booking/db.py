# venue_booking/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session

from venue_booking.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database.url

# SQLite needs check_same_thread off when sessions cross FastAPI's threadpool
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    echo=settings.database.echo,
    pool_pre_ping=True,
    connect_args=_connect_args,
)


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet."""
    from venue_booking import models  # noqa: F401 - registers the tables on the metadata

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database schema ready")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
