from typing import Any, Dict, Optional, List
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, JSON
from sqlmodel import SQLModel, Field, Relationship

from agromarket.core.schemas import OrmBaseModel
from agromarket.core.utils import utcnow
from agromarket.orders.config import ORDER_STATUS_PENDING
from agromarket.products.models import Product, ProductSummary
from agromarket.users.models import User

# --- Lignes de commande ---

class OrderItem(SQLModel, table=True):
    """Ligne de commande; créée une fois, jamais modifiée."""
    __tablename__ = "order_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    quantity: int = Field(..., gt=0)
    # Prix figé au moment de la commande (remise comprise)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    subtotal: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    # Relations
    order: "Order" = Relationship(back_populates="items")
    product: Product = Relationship()

# --- Commandes ---

class Order(SQLModel, table=True):
    """Modèle de table pour les commandes."""
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    buyer_id: int = Field(foreign_key="users.id", index=True)
    status: str = Field(default=ORDER_STATUS_PENDING, max_length=20, index=True)
    total_amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    # Copie de l'adresse au moment de la commande
    delivery_address: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    notes: Optional[str] = Field(default=None)
    expected_delivery_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    delivered_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    # Relations
    items: List["OrderItem"] = Relationship(back_populates="order")
    buyer: User = Relationship()

# --- Schémas API ---

class OrderCreate(SQLModel):
    """Corps de création: l'adresse par défaut est utilisée si `address_id` est absent."""
    address_id: Optional[int] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

class OrderStatusUpdate(SQLModel):
    status: str = Field(..., max_length=20)
    expected_delivery_at: Optional[datetime] = None

class BuyerSummary(OrmBaseModel):
    id: int
    name: str
    email: str

class OrderItemRead(OrmBaseModel):
    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    product: Optional[ProductSummary] = None

class OrderRead(OrmBaseModel):
    id: int
    buyer_id: int
    status: str
    total_amount: Decimal
    delivery_address: Dict[str, Any]
    notes: Optional[str] = None
    expected_delivery_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemRead] = []

class SaleRead(OrderRead):
    """Vue producteur: seules ses lignes sont listées, avec l'acheteur."""
    buyer: Optional[BuyerSummary] = None
