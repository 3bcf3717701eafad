"""
Exceptions personnalisées pour le module de gestion des stocks.
"""
from typing import Optional

from fastapi import status

from agromarket.core.exceptions import MarketplaceException


class StockError(MarketplaceException):
    """Classe de base pour les exceptions liées au stock."""
    pass


class InsufficientStockError(StockError):
    """Levée lorsque le stock est insuffisant pour une opération."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        product_name: str,
        available: int,
        product_id: Optional[int] = None,
        requested: Optional[int] = None,
    ):
        self.product_name = product_name
        self.available = available
        self.product_id = product_id
        self.requested = requested
        super().__init__(f"Stock insuffisant pour {product_name}. Disponible: {available}")


class InvalidStockMovementError(StockError):
    """Levée lorsque le mouvement de stock est invalide."""
    def __init__(self, message: str):
        super().__init__(f"Mouvement de stock invalide: {message}")
