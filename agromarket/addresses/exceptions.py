"""Exceptions spécifiques au domaine Address."""
from agromarket.core.exceptions import MarketplaceException, ResourceNotFoundException


class AddressNotFoundError(ResourceNotFoundException):
    """Levée lorsque l'adresse demandée n'existe pas ou n'appartient pas à l'utilisateur."""
    def __init__(self, address_id: int):
        super().__init__("Adresse non trouvée")
        self.address_id = address_id


class NoDeliveryAddressError(MarketplaceException):
    """Levée lorsqu'aucune adresse n'est fournie et que l'utilisateur n'a pas d'adresse par défaut."""
    def __init__(self, user_id: int):
        super().__init__("Aucune adresse de livraison trouvée. Veuillez en ajouter une.")
        self.user_id = user_id
