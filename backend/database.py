# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    # check_same_thread only applies to SQLite
    if "sqlite" in database_url:
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {}

    return create_engine(database_url, connect_args=connect_args, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    # Register every mapped table on Base.metadata before creating them
    import models.users  # noqa: F401
    import models.request  # noqa: F401
    import models.log  # noqa: F401

    Base.metadata.create_all(bind=engine)
