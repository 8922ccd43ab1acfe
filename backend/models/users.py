# backend/models/users.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base

ROLE_ADMIN = "ADMIN"
ROLE_USER = "USER"


# Represents a person who submits requests or administers them.
# Requesters created from the public form have an empty password_hash
# and cannot log in.
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False, default="")
    name = Column(String, nullable=True)
    team_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default=ROLE_USER)

    requests = relationship("Request", back_populates="user")
