# backend/seed.py
"""Create the tables and the admin account from configuration.

Usage: python seed.py
"""
import logging

from dotenv import load_dotenv

from config import Settings
from context import build_context
from database import init_db
from utils.bootstrap import ensure_admin

logger = logging.getLogger(__name__)


def seed(settings: Settings = None) -> None:
    settings = settings or Settings()
    ctx = build_context(settings)
    try:
        init_db(ctx.engine)
        admin = ensure_admin(ctx)
        logger.info("Admin ready: %s", admin.email)
    finally:
        ctx.engine.dispose()


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    seed()
