# utils/hashing.py
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # Requester accounts carry no password and can never authenticate
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)
