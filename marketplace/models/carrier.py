from sqlmodel import SQLModel, Field
from typing import Optional


class Carrier(SQLModel, table=True):
    __tablename__ = "carriers"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    tracking_url_template: Optional[str] = None  # e.g. https://track.example/{tracking_number}
    is_active: bool = True

    def tracking_url(self, tracking_number: Optional[str]) -> Optional[str]:
        if not tracking_number or not self.tracking_url_template:
            return None
        return self.tracking_url_template.replace("{tracking_number}", tracking_number)
