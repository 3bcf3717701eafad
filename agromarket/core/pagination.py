from typing import Annotated

from fastapi import Depends, Query
from pydantic import BaseModel

from agromarket.config import settings


class PageParams(BaseModel):
    page: int
    limit: int


def get_page_params(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)


PageParamsDep = Annotated[PageParams, Depends(get_page_params)]
