import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

# ======================================================
# Configuration Commune Pydantic
# ======================================================

# Configuration commune pour activer le mode ORM (from_attributes)
class OrmBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True
    )

# ======================================================
# Enveloppe de réponse commune
# ======================================================

T = TypeVar("T")


class PaginationMeta(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Enveloppe `{success, message, data, errors?, pagination?}` de toutes les réponses."""
    success: bool = True
    message: str
    data: Optional[T] = None
    errors: Optional[List[str]] = None
    pagination: Optional[PaginationMeta] = None


def error_payload(message: str, errors: Optional[List[str]] = None) -> dict:
    return ApiResponse[None](success=False, message=message, errors=errors).model_dump(exclude_none=True)
