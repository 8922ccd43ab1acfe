# backend/models/request.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base


# A logistics submission: one requester, one or more line items.
# The request and its items are always written in one transaction.
class Request(Base):
    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    status = Column(String, nullable=False, default="PENDING")

    user = relationship("User", back_populates="requests")
    items = relationship(
        "Item",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="Item.id",
    )


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("requests.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)
    price = Column(Numeric(12, 2), CheckConstraint("price >= 0"), nullable=False, default=0)
    source = Column(String, nullable=False)

    # Generated name of the stored attachment, if any
    sample_file = Column(String, nullable=True)

    request = relationship("Request", back_populates="items")
