from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import Optional, TYPE_CHECKING, List
from datetime import datetime
from decimal import Decimal

if TYPE_CHECKING:
    from .category import Category

LOW_STOCK_THRESHOLD = 10

class Product(SQLModel, table=True):
    __tablename__ = "products"

    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    seller_id: str = Field(foreign_key="profiles.id", index=True)
    name: str = Field(index=True)
    description: Optional[str] = None

    #Images
    image_url: Optional[str] = None
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    #Shop Details
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    compare_at_price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    sizes: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    colors: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    stock: int = 0
    is_active: bool = True
    is_featured: bool = False

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    #category
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id")
    category: Optional["Category"] = Relationship(back_populates="products")

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= LOW_STOCK_THRESHOLD
