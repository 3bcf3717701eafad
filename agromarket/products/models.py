"""
Modèles du catalogue produits.

- Product : table des produits mis en vente par les producteurs.
- ProductSnapshot : lecture figée du prix, de la remise et du stock d'un produit,
  capturée à l'intérieur de la transaction de commande.
- CategorySummary, ProducerSummary, ProductSummary : champs d'affichage joints
  aux lignes de panier et de commande.
"""
from typing import Optional
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship

from agromarket.categories.models import Category
from agromarket.core.schemas import OrmBaseModel
from agromarket.core.utils import utcnow
from agromarket.users.models import User


class ProductBase(SQLModel):
    """Champs communs d'un produit."""
    name: str = Field(max_length=200, index=True)
    description: Optional[str] = Field(default=None)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    unit: str = Field(default="kg", max_length=20)
    stock_quantity: int = Field(default=0, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True, index=True)
    on_sale: bool = Field(default=False)
    discount_percent: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)


class Product(ProductBase, table=True):
    """Modèle de table pour les produits."""
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    category_id: int = Field(foreign_key="categories.id", index=True)
    producer_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    # Relations
    category: Category = Relationship()
    producer: User = Relationship()


class ProductSnapshot(BaseModel):
    """État d'un produit au moment de la lecture; jamais modifié ensuite."""
    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    price: Decimal
    # 0 si aucune promotion active
    discount_percent: Decimal = Decimal("0")
    stock_quantity: int
    is_active: bool


# --- Schémas d'affichage ---

class CategorySummary(OrmBaseModel):
    id: int
    name: str


class ProducerSummary(OrmBaseModel):
    id: int
    name: str


class ProductSummary(OrmBaseModel):
    id: int
    name: str
    unit: str
    image_url: Optional[str] = None
    category: Optional[CategorySummary] = None
    producer: Optional[ProducerSummary] = None
