from sqlmodel import SQLModel, Session, create_engine

from vidgraph.config import settings

DATABASE_URL = settings.DATABASE_URL
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL must be set in the environment")

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)


def init_db():
    """Initialize database schema in local/dev when explicitly enabled.

    Prefer managed migrations in non-dev environments. To enable automatic
    table creation for local development, set DB_AUTO_CREATE=1.
    """
    # Register the table metadata before create_all.
    from vidgraph.db import models  # noqa: F401

    if settings.DB_AUTO_CREATE:
        SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
