from fastapi import APIRouter, Depends
from sqlmodel import Session

from marketplace.database import get_session
from marketplace.models.profile import Profile
from marketplace.schemas.user_schemas import ProfileRead, ProfileUpdate
from marketplace.utils.token import get_current_user

router = APIRouter()


@router.get("/me", response_model=ProfileRead)
def get_me(current_user: Profile = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=ProfileRead)
def update_me(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user)
):
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(current_user, key, value)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)
    return current_user
