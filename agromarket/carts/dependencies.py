from typing import Annotated

from fastapi import Depends

from agromarket.carts.service import CartService
from agromarket.database import DbSessionDep


def get_cart_service(db: DbSessionDep) -> CartService:
    return CartService(db=db)


CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
