"""Exceptions du catalogue produits."""
from agromarket.core.exceptions import MarketplaceException, ResourceNotFoundException


class ProductNotFoundError(ResourceNotFoundException):
    """Levée lorsqu'un produit n'existe pas ou n'est plus en vente."""
    def __init__(self, product_id: int):
        super().__init__("Produit non trouvé")
        self.product_id = product_id


class ProductUnavailableError(MarketplaceException):
    """Levée lorsqu'un produit du panier est désactivé ou absent du catalogue."""
    def __init__(self, product_name: str):
        super().__init__(f"Produit {product_name} non disponible")
        self.product_name = product_name
