import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from marketplace.exceptions import PromotionMinimumNotMet, PromotionNotFound
from marketplace.models.promotion import Promotion
from marketplace.services.pricing import PromotionSnapshot, to_decimal

logger = logging.getLogger(__name__)


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def find_active_promotion(session: Session, code: str) -> Optional[Promotion]:
    return session.exec(
        select(Promotion).where(
            Promotion.code == normalize_code(code),
            Promotion.is_active == True,  # noqa: E712
        )
    ).first()


def snapshot(promotion: Promotion) -> PromotionSnapshot:
    return PromotionSnapshot(
        id=promotion.id,
        code=promotion.code,
        discount_type=promotion.discount_type,
        discount_value=to_decimal(promotion.discount_value),
        min_order_amount=to_decimal(promotion.min_order_amount),
    )


def validate_promotion(session: Session, code: Optional[str], subtotal: Decimal) -> PromotionSnapshot:
    """
    Look up an active promotion by its code and check the order minimum.

    Raises PromotionNotFound for unknown, inactive or blank codes (and when the
    lookup itself fails), PromotionMinimumNotMet when the subtotal is below the
    promotion's floor.
    """
    normalized = normalize_code(code)
    if not normalized:
        raise PromotionNotFound(normalized)

    try:
        promotion = find_active_promotion(session, normalized)
    except SQLAlchemyError as e:
        logger.error(f"Promotion lookup failed for {normalized}: {e}")
        raise PromotionNotFound(normalized) from e

    if promotion is None:
        logger.info(f"Promotion {normalized} not found or inactive")
        raise PromotionNotFound(normalized)

    minimum = to_decimal(promotion.min_order_amount)
    if to_decimal(subtotal) < minimum:
        raise PromotionMinimumNotMet(normalized, minimum)

    return snapshot(promotion)


def increment_usage(session: Session, promotion_id: int) -> None:
    """
    Bump the usage counter in the database; caller owns the transaction.

    The increment is a single UPDATE so concurrent placements never overwrite
    each other's count.
    """
    result = session.connection().execute(
        update(Promotion)
        .where(Promotion.id == promotion_id)
        .values(usage_count=Promotion.usage_count + 1)
    )
    if result.rowcount == 0:
        raise PromotionNotFound(str(promotion_id))
