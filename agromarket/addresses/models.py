from datetime import datetime
from typing import Optional

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from agromarket.core.utils import utcnow


# --- Modèle de base pour les adresses ---
class AddressBase(SQLModel):
    """
    Schéma de base pour les adresses, contenant les champs communs.

    Attributes:
        street: Nom de la rue
        number: Numéro dans la rue
        complement: Complément (bâtiment, étage...)
        district: Quartier
        city: Ville
        state: Région / État
        zip_code: Code postal
        is_default: Indique si c'est l'adresse par défaut de l'utilisateur
    """
    street: str = Field(max_length=255)
    number: str = Field(max_length=20)
    complement: Optional[str] = Field(default=None, max_length=100)
    district: str = Field(max_length=100)
    city: str = Field(max_length=100, index=True)
    state: str = Field(max_length=50)
    zip_code: str = Field(max_length=20)
    is_default: bool = Field(default=False, index=True)

    @field_validator("street", "city")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or v.strip() == "":
            raise ValueError("Le champ ne peut pas être vide")
        return v.strip()


class Address(AddressBase, table=True):
    """Modèle de table pour les adresses de livraison."""
    __tablename__ = "addresses"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)


class AddressRead(AddressBase):
    id: int
    user_id: int
