from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class OrderEvent(SQLModel, table=True):
    """One entry in an order's status timeline."""

    __tablename__ = "order_events"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)

    # the status the order moved into
    event_type: str = Field(index=True)
    label: str

    # carrier, tracking number, totals ... whatever the transition carried
    meta: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # profile id of the customer or seller who triggered it
    created_by: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
