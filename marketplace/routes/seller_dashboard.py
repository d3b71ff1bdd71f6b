from fastapi import APIRouter, Depends
from sqlmodel import Session

from marketplace.database import get_session
from marketplace.models.profile import Profile
from marketplace.services.seller_stats import get_dashboard_stats
from marketplace.utils.token import get_current_seller

router = APIRouter()


@router.get("")
def dashboard(
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return get_dashboard_stats(session, seller.id)
