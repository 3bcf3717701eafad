"""Exceptions de base partagées par tous les modules du marketplace."""
from typing import List, Optional

from fastapi import status

from agromarket.config import settings


class MarketplaceException(Exception):
    """Classe de base des exceptions métier.

    Chaque sous-classe porte le code HTTP utilisé par le gestionnaire global
    pour construire l'enveloppe de réponse `{success: false, message, errors}`.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors
        super().__init__(self.message)


class ResourceNotFoundException(MarketplaceException):
    status_code = status.HTTP_404_NOT_FOUND


class TransactionFailureError(MarketplaceException):
    """Échec d'infrastructure pendant une transaction (verrou, connexion, deadlock).

    La transaction a été entièrement annulée; l'appelant peut réessayer.
    """
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True

    def __init__(self, message: str = settings.TRANSACTION_ERROR_MSG):
        super().__init__(message)
