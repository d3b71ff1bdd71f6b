import logging
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from marketplace.database import get_session
from marketplace.models.cart import CartItem
from marketplace.models.category import Category
from marketplace.models.order_item import OrderItem
from marketplace.models.product import Product
from marketplace.models.profile import Profile
from marketplace.models.review import Review
from marketplace.schemas.product_schemas import ProductCreate, ProductResponse, ProductUpdate
from marketplace.services.pricing import round2
from marketplace.utils.token import get_current_seller

logger = logging.getLogger(__name__)

router = APIRouter()

MONEY_FIELDS = ("price", "compare_at_price")


def get_own_product(session: Session, product_id: int, seller_id: str) -> Product:
    product = session.get(Product, product_id)
    if not product or product.seller_id != seller_id:
        raise HTTPException(404, "Product not found")
    return product


def check_category(session: Session, category_id):
    if category_id is not None and not session.get(Category, category_id):
        raise HTTPException(400, "Category does not exist")


@router.get("", response_model=List[ProductResponse])
def list_my_products(
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    products = session.exec(
        select(Product)
        .where(Product.seller_id == seller.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
    ).all()
    return [ProductResponse.model_validate(p) for p in products]


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    data: ProductCreate,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    check_category(session, data.category_id)

    values = data.model_dump()
    for field in MONEY_FIELDS:
        if values[field] is not None:
            values[field] = round2(values[field])

    product = Product(seller_id=seller.id, is_active=True, **values)

    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Seller {seller.id} listed product {product.id}")
    return ProductResponse.model_validate(product)


@router.get("/{product_id}", response_model=ProductResponse)
def get_my_product(
    product_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    return ProductResponse.model_validate(get_own_product(session, product_id, seller.id))


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    data: ProductUpdate,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    product = get_own_product(session, product_id, seller.id)

    update_data = data.model_dump(exclude_unset=True)
    if "category_id" in update_data:
        check_category(session, update_data["category_id"])

    for key, value in update_data.items():
        if key in MONEY_FIELDS and value is not None:
            value = round2(value)
        setattr(product, key, value)

    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)

    return ProductResponse.model_validate(product)


@router.patch("/{product_id}/toggle-active", response_model=ProductResponse)
def toggle_active(
    product_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    product = get_own_product(session, product_id, seller.id)

    product.is_active = not product.is_active
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)

    return ProductResponse.model_validate(product)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    product = get_own_product(session, product_id, seller.id)

    ordered = session.exec(
        select(OrderItem.id).where(OrderItem.product_id == product.id)
    ).first()
    if ordered is not None:
        raise HTTPException(409, "Product has orders, deactivate it instead")

    for row in session.exec(select(CartItem).where(CartItem.product_id == product.id)).all():
        session.delete(row)
    for row in session.exec(select(Review).where(Review.product_id == product.id)).all():
        session.delete(row)

    session.delete(product)
    session.commit()

    logger.info(f"Seller {seller.id} deleted product {product_id}")
    return {"message": "Product deleted"}
