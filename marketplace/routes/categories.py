from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from marketplace.database import get_session
from marketplace.models.category import Category
from marketplace.schemas.product_schemas import CategoryResponse

router = APIRouter()


@router.get("", response_model=List[CategoryResponse])
def list_categories(session: Session = Depends(get_session)):
    return session.exec(select(Category).order_by(Category.name)).all()
