"""Exceptions spécifiques au domaine Order."""
from typing import Iterable

from agromarket.core.exceptions import MarketplaceException, ResourceNotFoundException


class OrderNotFoundError(ResourceNotFoundException):
    """Levée lorsqu'une commande n'existe pas ou n'est pas accessible à l'utilisateur."""
    def __init__(self, order_id: int):
        super().__init__("Commande non trouvée")
        self.order_id = order_id


class OrderNotCancellableError(MarketplaceException):
    """Levée lorsque le statut de la commande ne permet plus l'annulation."""
    def __init__(self, order_id: int, status: str):
        super().__init__("Cette commande ne peut plus être annulée")
        self.order_id = order_id
        self.status = status


class OrderAlreadyFinalizedError(MarketplaceException):
    """Levée lors d'un changement de statut sur une commande livrée ou annulée."""
    def __init__(self, order_id: int, status: str):
        super().__init__("Commande déjà finalisée")
        self.order_id = order_id
        self.status = status


class InvalidStatusError(MarketplaceException):
    """Levée lorsque le statut demandé n'est pas applicable."""
    def __init__(self, status: str, allowed: Iterable[str]):
        self.status = status
        self.allowed = list(allowed)
        super().__init__(
            "Statut invalide",
            errors=[f"Le statut '{status}' est invalide. Statuts autorisés: {', '.join(self.allowed)}."],
        )
