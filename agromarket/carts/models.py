"""
Modèles du panier.

Un panier par utilisateur (créé à la première utilisation); une ligne par
produit, la quantité étant incrémentée lors d'un nouvel ajout.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

from agromarket.core.schemas import OrmBaseModel
from agromarket.core.utils import utcnow
from agromarket.products.models import Product, ProductSummary


class Cart(SQLModel, table=True):
    __tablename__ = "carts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    items: List["CartItem"] = Relationship(back_populates="cart")


class CartItemBase(SQLModel):
    cart_id: int = Field(foreign_key="carts.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    quantity: int = Field(ge=1)


class CartItem(CartItemBase, table=True):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="uq_cart_items_cart_product"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    cart: Cart = Relationship(back_populates="items")
    product: Product = Relationship()


class CartItemCreate(CartItemBase):
    pass


# --- Schémas API ---

class CartItemAdd(SQLModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class CartItemQuantityUpdate(SQLModel):
    quantity: int = Field(ge=1)


class CartItemRead(OrmBaseModel):
    product_id: int
    quantity: int
    # Prix courant du catalogue, remise comprise; figé seulement à la commande
    unit_price: Decimal
    subtotal: Decimal
    stock_quantity: int
    product: ProductSummary


class CartRead(OrmBaseModel):
    id: int
    items: List[CartItemRead] = []
    item_count: int = 0
    total: Decimal = Decimal("0.00")
