"""
Routes API FastAPI pour l'authentification.

- /token : Connexion et obtention d'un token JWT (formulaire OAuth2)
- /me : Informations de l'utilisateur connecté
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from agromarket.auth.dependencies import AuthServiceDep, CurrentUser
from agromarket.auth.models import Token
from agromarket.auth.security import create_access_token
from agromarket.core.schemas import ApiResponse
from agromarket.users.models import UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

@router.post("/token", response_model=Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDep,
):
    """
    Authentifie l'utilisateur et retourne un token JWT.

    - **username**: Email de l'utilisateur (utilisé comme identifiant)
    - **password**: Mot de passe de l'utilisateur
    """
    logger.info("[Router] Tentative de login pour: %s", form_data.username)
    user = await auth_service.authenticate_user(email=form_data.username, password=form_data.password)

    access_token = create_access_token(data={"sub": str(user.id)})
    logger.info("[Router] Token créé pour user ID: %s", user.id)
    return Token(access_token=access_token, token_type="bearer")

@router.get("/me", response_model=ApiResponse[UserRead], response_model_exclude_none=True)
async def read_users_me(current_user: CurrentUser):
    """Récupère les informations de l'utilisateur actuellement connecté."""
    return ApiResponse(message="Utilisateur courant", data=current_user)

auth_router = router
