from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional


# Schema for admin registration requests
class UserCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)

    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    team_name: Optional[str] = Field(None, alias="teamName")


# Schema for user authentication credentials
class UserLogin(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str


# Returned after a successful registration
class RegisterResponse(BaseModel):
    id: int
    email: str


# Public profile embedded in login responses
class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    role: str


# Requester details nested in request listings
class UserOut(UserSummary):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    team_name: Optional[str] = None


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


# Identity carried by a verified access token
class Principal(BaseModel):
    user_id: int
    role: str
