from decimal import Decimal
from typing import Optional

from agromarket.core.utils import round_money

HUNDRED = Decimal("100")


def effective_discount(on_sale: bool, discount_percent: Optional[Decimal]) -> Decimal:
    """Remise applicable: uniquement si le produit est en promotion et qu'un pourcentage est défini."""
    if on_sale and discount_percent:
        return Decimal(discount_percent)
    return Decimal("0")


def compute_final_price(price: Decimal, discount_percent: Decimal = Decimal("0")) -> Decimal:
    """Prix unitaire après remise, arrondi au centime."""
    return round_money(Decimal(price) * (HUNDRED - Decimal(discount_percent)) / HUNDRED)
