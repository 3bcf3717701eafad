# Standard Library
import os
from decimal import Decimal
from typing import AsyncGenerator, Dict, Optional

# La configuration est lue à l'import: forcer SQLite avant d'importer l'application
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker

# First-Party Libraries
from agromarket.main import app
from agromarket.database import create_tables, drop_tables, get_db_session
from agromarket.addresses.models import Address
from agromarket.auth.security import get_password_hash, create_access_token
from agromarket.carts.models import Cart, CartItem
from agromarket.categories.models import Category
from agromarket.orders.models import Order
from agromarket.products.models import Product
from agromarket.users.config import USER_ROLE_CONSUMER, USER_ROLE_PRODUCER
from agromarket.users.models import User

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

API_PREFIX = "/api/v1"


async def persist(session: AsyncSession, obj):
    """Insère l'objet, commit, puis le détache pour qu'un rollback ultérieur ne l'expire pas."""
    session.add(obj)
    await session.commit()
    session.expunge(obj)
    return obj


async def stock_of(session: AsyncSession, product_id: int) -> int:
    """Stock lu directement en base, sans passer par l'identity map."""
    return await session.scalar(select(Product.stock_quantity).where(Product.id == product_id))


async def count_orders(session: AsyncSession, buyer_id: Optional[int] = None) -> int:
    stmt = select(Order.id)
    if buyer_id is not None:
        stmt = stmt.where(Order.buyer_id == buyer_id)
    return len((await session.execute(stmt)).all())


async def count_cart_items(session: AsyncSession, user_id: int) -> int:
    stmt = select(CartItem.id).join(Cart, Cart.id == CartItem.cart_id).where(Cart.user_id == user_id)
    return len((await session.execute(stmt)).all())


def auth_headers_for(user: User) -> Dict[str, str]:
    access_token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {access_token}"}


# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(TEST_DATABASE_BASE_URL, echo=False)
    await create_tables(bind=engine)

    TestingSessionLocal = sessionmaker(
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await drop_tables(bind=engine)
    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test isolée."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    del app.dependency_overrides[get_db_session]

# --- Fixtures Utilisateur et Authentification ---

@pytest_asyncio.fixture(scope="function")
async def consumer(db_session: AsyncSession) -> User:
    user = User(
        email="consumer@example.com",
        name="Claire Consommatrice",
        role=USER_ROLE_CONSUMER,
        password_hash=get_password_hash("consumerpassword"),
    )
    return await persist(db_session, user)

@pytest_asyncio.fixture(scope="function")
async def other_consumer(db_session: AsyncSession) -> User:
    user = User(
        email="other@example.com",
        name="Olivier Autre",
        role=USER_ROLE_CONSUMER,
        password_hash=get_password_hash("otherpassword"),
    )
    return await persist(db_session, user)

@pytest_asyncio.fixture(scope="function")
async def producer(db_session: AsyncSession) -> User:
    user = User(
        email="producer@example.com",
        name="Ferme des Coteaux",
        role=USER_ROLE_PRODUCER,
        password_hash=get_password_hash("producerpassword"),
    )
    return await persist(db_session, user)

@pytest_asyncio.fixture(scope="function")
async def other_producer(db_session: AsyncSession) -> User:
    user = User(
        email="other.producer@example.com",
        name="Maraîcher du Val",
        role=USER_ROLE_PRODUCER,
        password_hash=get_password_hash("otherproducerpassword"),
    )
    return await persist(db_session, user)

@pytest.fixture
def consumer_headers(consumer: User) -> Dict[str, str]:
    return auth_headers_for(consumer)

@pytest.fixture
def producer_headers(producer: User) -> Dict[str, str]:
    return auth_headers_for(producer)

# --- Fixtures Catalogue ---

@pytest_asyncio.fixture(scope="function")
async def category(db_session: AsyncSession) -> Category:
    return await persist(db_session, Category(name="Légumes", description="Légumes de saison"))

async def make_product(
    session: AsyncSession,
    category: Category,
    producer: User,
    name: str,
    price: str,
    stock: int,
    on_sale: bool = False,
    discount_percent: Optional[str] = None,
    is_active: bool = True,
) -> Product:
    product = Product(
        name=name,
        price=Decimal(price),
        unit="kg",
        stock_quantity=stock,
        category_id=category.id,
        producer_id=producer.id,
        on_sale=on_sale,
        discount_percent=Decimal(discount_percent) if discount_percent else None,
        is_active=is_active,
    )
    return await persist(session, product)

@pytest_asyncio.fixture(scope="function")
async def tomatoes(db_session: AsyncSession, category: Category, producer: User) -> Product:
    return await make_product(db_session, category, producer, "Tomates", "5.00", 10)

@pytest_asyncio.fixture(scope="function")
async def carrots(db_session: AsyncSession, category: Category, producer: User) -> Product:
    return await make_product(db_session, category, producer, "Carottes", "3.50", 10)

# --- Fixtures Adresses et Panier ---

async def make_address(session: AsyncSession, user: User, city: str = "Lyon", is_default: bool = True) -> Address:
    address = Address(
        user_id=user.id,
        street="Rue des Lilas",
        number="12",
        district="Croix-Rousse",
        city=city,
        state="Auvergne-Rhône-Alpes",
        zip_code="69004",
        is_default=is_default,
    )
    return await persist(session, address)

@pytest_asyncio.fixture(scope="function")
async def default_address(db_session: AsyncSession, consumer: User) -> Address:
    return await make_address(db_session, consumer)

async def fill_cart(session: AsyncSession, user: User, lines: Dict[int, int]) -> Cart:
    """Ajoute les lignes {product_id: quantité} au panier de l'utilisateur (créé si besoin)."""
    cart = await session.scalar(select(Cart).where(Cart.user_id == user.id))
    if cart is None:
        cart = Cart(user_id=user.id)
        session.add(cart)
        await session.flush()
    cart_id = cart.id
    for product_id, quantity in lines.items():
        session.add(CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity))
    await session.commit()
    session.expunge_all()
    return cart
