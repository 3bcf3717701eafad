from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

# Entités du Domaine "Orders" (valeurs immuables, sans accès base)


class CartLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int = Field(..., ge=1)


class OrderLineDraft(BaseModel):
    """Ligne validée, avec le prix unitaire figé au moment de la commande."""
    model_config = ConfigDict(frozen=True)

    product_id: int
    product_name: str
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    subtotal: Decimal = Field(..., ge=0)


class OrderDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: Tuple[OrderLineDraft, ...]
    total_amount: Decimal

