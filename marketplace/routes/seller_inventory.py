from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from marketplace.database import get_session
from marketplace.models.product import Product
from marketplace.models.profile import Profile
from marketplace.routes.seller_products import get_own_product
from marketplace.schemas.product_schemas import StockUpdate
from marketplace.services.inventory_service import set_stock
from marketplace.utils.token import get_current_seller

router = APIRouter()


def inventory_row(product: Product) -> dict:
    return {
        "product_id": product.id,
        "name": product.name,
        "price": float(product.price),
        "stock": product.stock,
        "is_active": product.is_active,
        "low_stock": product.is_low_stock,
        "out_of_stock": not product.in_stock,
        "updated_at": product.updated_at,
    }


@router.get("")
def list_inventory(
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    products = session.exec(
        select(Product)
        .where(Product.seller_id == seller.id)
        .order_by(Product.stock.asc(), Product.id)
    ).all()
    return [inventory_row(p) for p in products]


@router.put("/{product_id}")
def update_stock(
    product_id: int,
    data: StockUpdate,
    session: Session = Depends(get_session),
    seller: Profile = Depends(get_current_seller)
):
    product = get_own_product(session, product_id, seller.id)
    product = set_stock(session, product, data.stock)
    return inventory_row(product)
