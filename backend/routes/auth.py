# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy import func
from sqlalchemy.orm import Session

from context import AppContext, get_context, get_db
from models.users import ROLE_ADMIN, User
from schemas import user as schemas
from utils.audit import client_ip, write_log
from utils.errors import Unauthorized, ValidationError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])


# Register a new admin account
@router.post("/register", response_model=schemas.RegisterResponse)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()

    db_user = db.query(User).filter(func.lower(User.email) == normalized_email).first()
    if db_user:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise ValidationError("User already exists")

    new_user = User(
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        name=payload.name,
        team_name=payload.team_name,
        role=ROLE_ADMIN,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth",
              ip=client_ip(request), meta={"email": new_user.email})

    return {"id": new_user.id, "email": new_user.email}


# Authenticate an admin and issue a JWT
@router.post("/login", response_model=schemas.LoginResponse)
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    email = payload.email.strip().lower()
    db_user = db.query(User).filter(func.lower(User.email) == email).first()

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        logger.info("Login failed for %s", email)
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise Unauthorized("Invalid credentials")

    token = create_access_token(ctx.settings, db_user.id, db_user.role)

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              ip=client_ip(request), meta={"email": db_user.email})

    return {"token": token, "user": schemas.UserSummary.model_validate(db_user)}
