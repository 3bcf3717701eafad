"""
Service d'authentification pour l'API.

Contient la logique métier pour:
- L'authentification des utilisateurs (email + mot de passe)
- L'obtention de l'utilisateur courant à partir d'un token JWT
"""
import logging
from typing import Optional

from fastcrud import FastCRUD
from sqlalchemy.ext.asyncio import AsyncSession

from agromarket.auth.exceptions import InactiveUserException, InvalidCredentialsException
from agromarket.auth.security import verify_password, decode_access_token
from agromarket.users.models import User, UserRead

logger = logging.getLogger(__name__)

crud_user = FastCRUD(User)

class AuthService:
    """Service pour gérer l'authentification des utilisateurs avec FastCRUD."""

    def __init__(self, db: AsyncSession, user_crud: FastCRUD = crud_user):
        self.user_crud = user_crud
        self.db = db

    async def authenticate_user(self, email: str, password: str) -> UserRead:
        """
        Authentifie un utilisateur par email et mot de passe.

        Raises:
            InvalidCredentialsException: email inconnu ou mot de passe incorrect
            InactiveUserException: compte désactivé
        """
        logger.debug(f"[AuthService] Tentative d'authentification pour: {email}")

        # Sans schema_to_select, FastCRUD retourne toutes les colonnes (dict), hash compris
        user = await self.user_crud.get(db=self.db, email=email)
        if user is None:
            logger.warning(f"[AuthService] Utilisateur non trouvé: {email}")
            raise InvalidCredentialsException()

        if not verify_password(password, user["password_hash"]):
            logger.warning(f"[AuthService] Mot de passe incorrect pour: {email}")
            raise InvalidCredentialsException()

        if not user["is_active"]:
            logger.warning(f"[AuthService] Tentative de connexion d'un utilisateur inactif: {email}")
            raise InactiveUserException()

        logger.info(f"[AuthService] Authentification réussie pour: {email} (ID: {user['id']})")
        return UserRead.model_validate(user)

    async def get_user_from_token(self, token: str) -> Optional[UserRead]:
        """
        Récupère un utilisateur à partir d'un token JWT.
        Retourne le schéma UserRead si succès, sinon None.
        """
        user_id = decode_access_token(token)
        if user_id is None:
            logger.warning("[AuthService] Token invalide ou expiré")
            return None

        user: Optional[UserRead] = await self.user_crud.get(
            db=self.db,
            schema_to_select=UserRead,
            return_as_model=True,
            id=user_id,
        )
        if user is None:
            logger.warning(f"[AuthService] Utilisateur ID {user_id} du token non trouvé en base")
            return None

        logger.debug(f"[AuthService] Utilisateur récupéré depuis token: ID {user_id}")
        return user
