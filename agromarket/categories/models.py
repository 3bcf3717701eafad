from typing import Optional

from sqlmodel import SQLModel, Field


class CategoryBase(SQLModel):
    name: str = Field(max_length=100, unique=True, index=True)
    description: Optional[str] = Field(default=None)
    icon: Optional[str] = Field(default=None, max_length=50)


class Category(CategoryBase, table=True):
    """Modèle de table pour les catégories du catalogue."""
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    is_active: bool = Field(default=True)
