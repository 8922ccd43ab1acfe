# backend/context.py
import time
from dataclasses import dataclass, field

from fastapi import Depends, Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import Settings
from database import create_db_engine, create_session_factory
from utils.file_store import FileStore


@dataclass
class AppContext:
    """Everything a handler needs, built once per process."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    files: FileStore
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime(self) -> int:
        return int(time.monotonic() - self.started_at)


def build_context(settings: Settings) -> AppContext:
    engine = create_db_engine(settings.DATABASE_URL)
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        files=FileStore(settings.UPLOAD_DIR, settings.MAX_FILE_SIZE),
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_db(ctx: AppContext = Depends(get_context)):
    db: Session = ctx.session_factory()
    try:
        yield db
    finally:
        db.close()
