"""
Configuration spécifique au module Orders.
Contient les statuts de commande et les ensembles utilisés par le cycle de vie.
"""

from typing import FrozenSet, Tuple

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_CONFIRMED = "confirmed"
ORDER_STATUS_PREPARING = "preparing"
ORDER_STATUS_SHIPPED = "shipped"
ORDER_STATUS_DELIVERED = "delivered"
ORDER_STATUS_CANCELLED = "cancelled"

# Statuts autorisés pour une commande, dans l'ordre du parcours nominal
ALLOWED_ORDER_STATUS: Tuple[str, ...] = (
    ORDER_STATUS_PENDING,
    ORDER_STATUS_CONFIRMED,
    ORDER_STATUS_PREPARING,
    ORDER_STATUS_SHIPPED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_CANCELLED,
)

# Une commande n'est annulable qu'avant sa préparation
CANCELLABLE_ORDER_STATUS: FrozenSet[str] = frozenset({ORDER_STATUS_PENDING, ORDER_STATUS_CONFIRMED})

# Statuts terminaux
FINALIZED_ORDER_STATUS: FrozenSet[str] = frozenset({ORDER_STATUS_DELIVERED, ORDER_STATUS_CANCELLED})

# Statuts qu'un producteur peut appliquer
PRODUCER_SETTABLE_STATUS: Tuple[str, ...] = (
    ORDER_STATUS_CONFIRMED,
    ORDER_STATUS_PREPARING,
    ORDER_STATUS_SHIPPED,
    ORDER_STATUS_DELIVERED,
)
