"""Exceptions du module panier."""
from agromarket.core.exceptions import MarketplaceException, ResourceNotFoundException


class EmptyCartError(MarketplaceException):
    """Levée lorsqu'une commande est demandée sur un panier sans lignes."""
    def __init__(self):
        super().__init__("Panier vide")


class CartItemNotFoundError(ResourceNotFoundException):
    def __init__(self, product_id: int):
        super().__init__("Article non trouvé dans le panier")
        self.product_id = product_id
