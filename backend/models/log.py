# backend/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from database import Base


# One audited event: REGISTER / LOGIN attempts, REQUEST_SUBMIT, REQUEST_EXPORT.
# user_id is empty for failed logins on unknown emails.
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    action = Column(String(32), nullable=False, index=True)
    resource = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="SUCCESS")
    ip = Column(String(64), nullable=True)

    # e.g. {"request_id": 3, "items": 2} or {"email": "..."}
    meta = Column(JSON, nullable=True)

    actor = relationship("User")
