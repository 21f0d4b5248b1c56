from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    """Identity snapshot used to decorate read models"""
    id: int
    username: str
    email: str

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    created_at: datetime
