from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from marketplace.database import get_session
from marketplace.models.carrier import Carrier
from marketplace.models.profile import Profile
from marketplace.schemas.order_schemas import CarrierResponse
from marketplace.utils.token import get_current_seller

router = APIRouter()


@router.get("", response_model=List[CarrierResponse])
def list_carriers(
    session: Session = Depends(get_session),
    _: Profile = Depends(get_current_seller)
):
    return session.exec(
        select(Carrier).where(Carrier.is_active == True).order_by(Carrier.name)  # noqa: E712
    ).all()
