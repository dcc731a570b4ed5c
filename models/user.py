from datetime import datetime
from pydantic import Field
from typing import Optional

from .base import BaseGolfModel


class User(BaseGolfModel):
    """A registered golfer."""
    id: Optional[str] = None
    email: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    handicap: Optional[float] = Field(None, ge=0, le=54)
    phone: Optional[str] = Field(None, max_length=20)
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Never serialized into API responses
    password_hash: Optional[str] = Field(None, exclude=True, repr=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
