# utils/bootstrap.py
import logging

from context import AppContext
from models.users import ROLE_ADMIN, User
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)


def ensure_admin(ctx: AppContext) -> User:
    """Create the configured admin account, or reset its password to the configured one."""
    settings = ctx.settings
    email = settings.ADMIN_EMAIL.strip().lower()
    hashed = get_password_hash(settings.ADMIN_PASSWORD)

    with ctx.session_factory() as db:
        admin = db.query(User).filter(User.email == email).first()
        if admin is None:
            admin = User(
                email=email,
                password_hash=hashed,
                name=settings.ADMIN_NAME,
                team_name="Administration",
                role=ROLE_ADMIN,
            )
            db.add(admin)
            logger.info("Admin user created: %s", email)
        else:
            admin.password_hash = hashed
            admin.role = ROLE_ADMIN
            logger.info("Admin user %s exists, password updated from configuration", email)
        db.commit()
        db.refresh(admin)
        db.expunge(admin)

    if settings.ADMIN_PASSWORD == "admin123":
        logger.warning("Admin account uses the default password, set ADMIN_PASSWORD")
    return admin
