"""
Module définissant les dépendances FastAPI pour l'authentification.

Fournit des dépendances pour:
- Le service d'authentification (AuthService)
- L'obtention de l'utilisateur courant à partir du token JWT
- La vérification du rôle (consommateur / producteur)
"""
import logging
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from agromarket.auth.constants import OAUTH2_TOKEN_URL
from agromarket.auth.exceptions import (
    InactiveUserException,
    PermissionDeniedException,
    TokenInvalidException,
    TokenMissingException,
)
from agromarket.auth.service import AuthService
from agromarket.database import DbSessionDep
from agromarket.users.config import USER_ROLE_CONSUMER, USER_ROLE_PRODUCER
from agromarket.users.models import UserRead

logger = logging.getLogger(__name__)

# --- Dépendances OAuth2 ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=OAUTH2_TOKEN_URL, auto_error=False)


def get_auth_service(db: DbSessionDep) -> AuthService:
    return AuthService(db=db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    auth_service: AuthServiceDep,
) -> UserRead:
    """
    Vérifie le token JWT et retourne l'utilisateur courant, qui doit être actif.

    Raises:
        TokenMissingException: Si le token est manquant
        TokenInvalidException: Si le token est invalide ou l'utilisateur inconnu
        InactiveUserException: Si le compte est désactivé
    """
    if token is None:
        logger.warning("Token manquant dans la requête.")
        raise TokenMissingException()

    user = await auth_service.get_user_from_token(token)
    if user is None:
        logger.warning("Token invalide ou utilisateur non trouvé.")
        raise TokenInvalidException()

    if not user.is_active:
        logger.warning(f"Tentative d'accès par un utilisateur inactif: ID {user.id}")
        raise InactiveUserException()

    logger.debug(f"Utilisateur authentifié: ID {user.id}")
    return user


CurrentUser = Annotated[UserRead, Depends(get_current_user)]


def require_role(role: str):
    """Fabrique une dépendance qui exige le rôle `role`."""
    async def _check_role(current_user: CurrentUser) -> UserRead:
        if current_user.role != role:
            logger.warning(
                f"Accès refusé: rôle '{current_user.role}' au lieu de '{role}' (utilisateur ID {current_user.id})"
            )
            raise PermissionDeniedException()
        return current_user
    return _check_role


require_consumer = require_role(USER_ROLE_CONSUMER)
require_producer = require_role(USER_ROLE_PRODUCER)

CurrentConsumer = Annotated[UserRead, Depends(require_consumer)]
CurrentProducer = Annotated[UserRead, Depends(require_producer)]
