from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Profile(SQLModel, table=True):
    __tablename__ = "profiles"

    # subject claim from the identity provider
    id: str = Field(primary_key=True)
    email: str = Field(index=True)
    full_name: str = ""
    role: str = Field(default="customer")  # customer | seller
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
