from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

MONEY_QUANTUM = Decimal("0.01")


def utcnow() -> datetime:
    """Horodatage UTC avec fuseau, tel que stocké dans les colonnes DateTime(timezone=True)."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Rattache une date naïve à UTC; une date avec fuseau est convertie en UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_money(value: Decimal) -> Decimal:
    """Arrondit un montant au centime (demi supérieur)."""
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
