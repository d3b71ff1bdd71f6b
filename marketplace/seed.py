"""
Seed reference data: categories, carriers and the launch promotions.

    python -m marketplace.seed
"""
import logging
from decimal import Decimal

from slugify import slugify
from sqlmodel import Session, select

from marketplace.models.carrier import Carrier
from marketplace.models.category import Category
from marketplace.models.promotion import Promotion

logger = logging.getLogger(__name__)

CATEGORIES = [
    ("Dresses", "Day, evening and occasion dresses"),
    ("Tops & Shirts", None),
    ("Outerwear", "Coats and jackets"),
    ("Denim", None),
    ("Shoes", None),
    ("Accessories", "Bags, belts and jewelry"),
]

CARRIERS = [
    ("UPS", "https://www.ups.com/track?tracknum={tracking_number}"),
    ("FedEx", "https://www.fedex.com/fedextrack/?trknbr={tracking_number}"),
    ("USPS", "https://tools.usps.com/go/TrackConfirmAction?tLabels={tracking_number}"),
    ("DHL", "https://www.dhl.com/en/express/tracking.html?AWB={tracking_number}"),
]

PROMOTIONS = [
    ("WELCOME10", "10% off your first order", "percentage", Decimal("10"), Decimal("0")),
    ("SAVE20", "20% off orders over $100", "percentage", Decimal("20"), Decimal("100")),
    ("SPRING25", "$25 off orders over $150", "fixed", Decimal("25"), Decimal("150")),
]


def seed(session: Session) -> dict:
    created = {"categories": 0, "carriers": 0, "promotions": 0}

    for name, description in CATEGORIES:
        slug = slugify(name)
        if not session.exec(select(Category).where(Category.slug == slug)).first():
            session.add(Category(name=name, slug=slug, description=description))
            created["categories"] += 1

    for name, template in CARRIERS:
        if not session.exec(select(Carrier).where(Carrier.name == name)).first():
            session.add(Carrier(name=name, tracking_url_template=template))
            created["carriers"] += 1

    for code, description, kind, value, minimum in PROMOTIONS:
        if not session.exec(select(Promotion).where(Promotion.code == code)).first():
            session.add(Promotion(
                code=code,
                description=description,
                discount_type=kind,
                discount_value=value,
                min_order_amount=minimum,
            ))
            created["promotions"] += 1

    session.commit()
    logger.info(f"Seeded {created}")
    return created


if __name__ == "__main__":
    from marketplace.database import create_db_and_tables, engine

    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    with Session(engine) as session:
        seed(session)
