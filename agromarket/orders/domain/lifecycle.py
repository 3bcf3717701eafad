"""
Cycle de vie d'une commande.

pending -> confirmed -> preparing -> shipped -> delivered, avec `cancelled`
accessible depuis pending ou confirmed. delivered et cancelled sont terminaux.
L'ordre entre les statuts non terminaux n'est pas imposé.
"""
from datetime import datetime
from typing import Any, Dict, Optional

from agromarket.core.utils import as_utc, utcnow
from agromarket.orders.config import (
    CANCELLABLE_ORDER_STATUS,
    FINALIZED_ORDER_STATUS,
    ORDER_STATUS_DELIVERED,
    PRODUCER_SETTABLE_STATUS,
)
from agromarket.orders.exceptions import InvalidStatusError, OrderAlreadyFinalizedError


def can_cancel(status: str) -> bool:
    return status in CANCELLABLE_ORDER_STATUS


def is_finalized(status: str) -> bool:
    return status in FINALIZED_ORDER_STATUS


def validate_target_status(target: str) -> str:
    if target not in PRODUCER_SETTABLE_STATUS:
        raise InvalidStatusError(target, PRODUCER_SETTABLE_STATUS)
    return target


def ensure_not_finalized(order_id: int, status: str) -> None:
    if is_finalized(status):
        raise OrderAlreadyFinalizedError(order_id, status)


def build_status_update(
    order_id: int,
    current: str,
    target: str,
    now: Optional[datetime] = None,
    expected_delivery_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Valeurs à écrire pour passer la commande de `current` à `target`.

    Le passage à `delivered` horodate la livraison effective. Une date de
    livraison prévue, si fournie, est enregistrée en UTC.
    """
    validate_target_status(target)
    ensure_not_finalized(order_id, current)
    now = now or utcnow()
    values: Dict[str, Any] = {"status": target, "updated_at": now}
    if target == ORDER_STATUS_DELIVERED:
        values["delivered_at"] = now
    if expected_delivery_at is not None:
        values["expected_delivery_at"] = as_utc(expected_delivery_at)
    return values
