"""
Assemblage d'une commande à partir des lignes du panier et des instantanés
du catalogue.

Fonctions pures: aucune entrée/sortie, le résultat ne dépend que des
arguments. La première violation rencontrée interrompt l'assemblage.
"""
from decimal import Decimal
from typing import Dict, Mapping, Sequence

from agromarket.carts.exceptions import EmptyCartError
from agromarket.core.utils import round_money
from agromarket.orders.domain.entities import CartLine, OrderDraft, OrderLineDraft
from agromarket.products.exceptions import ProductUnavailableError
from agromarket.products.models import ProductSnapshot
from agromarket.products.utils import compute_final_price
from agromarket.stock.exceptions import InsufficientStockError


def make_order_line(line: CartLine, snapshot: ProductSnapshot) -> OrderLineDraft:
    """Construit une ligne de commande; seul point de calcul du prix figé et du sous-total."""
    unit_price = compute_final_price(snapshot.price, snapshot.discount_percent)
    return OrderLineDraft(
        product_id=line.product_id,
        product_name=snapshot.name,
        quantity=line.quantity,
        unit_price=unit_price,
        subtotal=round_money(unit_price * line.quantity),
    )


def assemble_order(lines: Sequence[CartLine], snapshots: Mapping[int, ProductSnapshot]) -> OrderDraft:
    """Valide les lignes du panier contre le catalogue et calcule le total.

    Raises:
        EmptyCartError: aucune ligne
        ProductUnavailableError: produit absent du catalogue ou désactivé
        InsufficientStockError: quantité demandée (cumulée par produit) supérieure au stock
    """
    if not lines:
        raise EmptyCartError()

    requested: Dict[int, int] = {}
    drafts = []
    for line in lines:
        snapshot = snapshots.get(line.product_id)
        if snapshot is None or not snapshot.is_active:
            raise ProductUnavailableError(snapshot.name if snapshot else f"#{line.product_id}")

        requested[line.product_id] = requested.get(line.product_id, 0) + line.quantity
        if snapshot.stock_quantity < requested[line.product_id]:
            raise InsufficientStockError(
                product_name=snapshot.name,
                available=snapshot.stock_quantity,
                product_id=snapshot.product_id,
                requested=requested[line.product_id],
            )

        drafts.append(make_order_line(line, snapshot))

    total = round_money(sum((d.subtotal for d in drafts), Decimal("0")))
    return OrderDraft(lines=tuple(drafts), total_amount=total)
