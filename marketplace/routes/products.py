from enum import Enum
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlmodel import Session, select

from marketplace.database import get_session
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.profile import Profile
from marketplace.models.review import Review
from marketplace.schemas.product_schemas import ProductResponse
from marketplace.schemas.review_schemas import ReviewCreate
from marketplace.utils.pagination import paginate
from marketplace.utils.token import get_current_customer

router = APIRouter()


class ProductSort(str, Enum):
    newest = "newest"
    price_low = "price_low"
    price_high = "price_high"
    name = "name"


SORT_ORDER = {
    ProductSort.newest: (Product.created_at.desc(), Product.id.desc()),
    ProductSort.price_low: (Product.price.asc(), Product.id),
    ProductSort.price_high: (Product.price.desc(), Product.id),
    ProductSort.name: (Product.name.asc(), Product.id),
}


def get_active_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product or not product.is_active:
        raise HTTPException(404, "Product not found")
    return product


def rating_summary(session: Session, product_id: int) -> dict:
    count, avg = session.exec(
        select(func.count(Review.id), func.avg(Review.rating)).where(Review.product_id == product_id)
    ).one()
    return {
        "review_count": count,
        "avg_rating": round(float(avg), 1) if avg is not None else None,
    }


@router.get("", summary="Browse active products")
def list_products(
    category: Optional[str] = Query(None, description="Category slug, 'all' for every category"),
    search: Optional[str] = None,
    sort: ProductSort = ProductSort.newest,
    featured: Optional[bool] = None,
    page: int = 1,
    limit: int = 20,
    session: Session = Depends(get_session)
):
    query = select(Product).where(Product.is_active == True)  # noqa: E712

    if category and category != "all":
        cat = session.exec(select(Category).where(Category.slug == category)).first()
        if not cat:
            raise HTTPException(404, "Category not found")
        query = query.where(Product.category_id == cat.id)

    if search:
        query = query.where(Product.name.ilike(f"%{search.strip()}%"))

    if featured is not None:
        query = query.where(Product.is_featured == featured)

    query = query.order_by(*SORT_ORDER[sort])

    result = paginate(session, query, page, limit)
    result["results"] = [ProductResponse.model_validate(p) for p in result["results"]]
    return result


@router.get("/{product_id}", summary="Product detail with reviews")
def product_detail(product_id: int, session: Session = Depends(get_session)):
    product = get_active_product(session, product_id)

    reviews = session.exec(
        select(Review, Profile)
        .join(Profile, Profile.id == Review.customer_id)
        .where(Review.product_id == product.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    ).all()

    return {
        "product": ProductResponse.model_validate(product),
        **rating_summary(session, product.id),
        "reviews": [
            {
                "id": r.id,
                "product_id": r.product_id,
                "customer_id": r.customer_id,
                "customer_name": p.full_name,
                "rating": r.rating,
                "comment": r.comment,
                "created_at": r.created_at,
            }
            for r, p in reviews
        ],
    }


@router.post("/{product_id}/reviews", status_code=201)
def create_review(
    product_id: int,
    data: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_customer)
):
    product = get_active_product(session, product_id)

    review = Review(
        product_id=product.id,
        customer_id=current_user.id,
        rating=data.rating,
        comment=data.comment,
    )

    session.add(review)
    session.commit()
    session.refresh(review)

    return {"message": "Review added", "review": review}
