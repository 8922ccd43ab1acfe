# schemas/request.py
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from schemas.user import UserOut

# Column limits: 32-bit INTEGER quantity, NUMERIC(12, 2) price
MAX_QUANTITY = 2_147_483_647
MAX_PRICE = Decimal("9999999999.99")
CENT = Decimal("0.01")


# Camel-case output matching the form field names
class CamelModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# Top-level multipart fields of a submission (items still raw JSON)
class RequestSubmission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    email: EmailStr
    team_name: str = Field(min_length=1)
    items: str = Field(min_length=1)


# One line item as sent by the form
class ItemIn(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    quantity: int
    price: Decimal = Decimal("0")
    source: str = Field(min_length=1)

    # Client filename of the upload that belongs to this item
    attachment: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _parse_quantity(cls, value):
        if isinstance(value, bool):
            raise ValueError("quantity must be a positive integer")
        if isinstance(value, str):
            value = value.strip()
            if not value.lstrip("-").isdigit():
                raise ValueError("quantity must be a positive integer")
            value = int(value)
        if not isinstance(value, int) or value <= 0:
            raise ValueError("quantity must be a positive integer")
        if value > MAX_QUANTITY:
            raise ValueError(f"quantity must not exceed {MAX_QUANTITY}")
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return Decimal("0")
        if isinstance(value, bool):
            raise ValueError("price must be a non-negative number")
        try:
            price = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError("price must be a non-negative number")
        if not price.is_finite() or price < 0:
            raise ValueError("price must be a non-negative number")
        if price > MAX_PRICE:
            raise ValueError(f"price must not exceed {MAX_PRICE}")
        return price.quantize(CENT, rounding=ROUND_HALF_UP)

    @field_validator("attachment")
    @classmethod
    def _blank_attachment(cls, value):
        return value or None


class ItemOut(CamelModel):
    id: int
    request_id: int
    name: str
    description: str
    quantity: int
    price: float
    source: str
    sample_file: Optional[str] = None


class RequestOut(CamelModel):
    id: int
    user_id: int
    created_at: Optional[datetime] = None
    status: str
    user: Optional[UserOut] = None
    items: List[ItemOut]
