from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import API_PREFIX, auth_headers_for, count_orders, fill_cart, stock_of

ORDERS_URL = f"{API_PREFIX}/orders"


@pytest.mark.asyncio
async def test_create_order(
    test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, tomatoes, carrots, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 2, carrots.id: 1})

    response = await test_client.post(ORDERS_URL, json={"notes": "Livrer le matin"}, headers=consumer_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    order = body["data"]
    assert order["status"] == "pending"
    assert Decimal(order["total_amount"]) == Decimal("13.50")
    assert order["delivery_address"]["city"] == "Lyon"
    assert {item["product"]["name"] for item in order["items"]} == {"Tomates", "Carottes"}
    assert order["items"][0]["product"]["producer"]["name"] == "Ferme des Coteaux"


@pytest.mark.asyncio
async def test_create_order_empty_cart(test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, default_address):
    response = await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Panier vide"}


@pytest.mark.asyncio
async def test_create_order_insufficient_stock(
    test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, tomatoes, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 12})
    response = await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Stock insuffisant pour Tomates. Disponible: 10"
    assert await count_orders(db_session) == 0


@pytest.mark.asyncio
async def test_create_order_unknown_address(
    test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, tomatoes, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 1})
    response = await test_client.post(ORDERS_URL, json={"address_id": 9999}, headers=consumer_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Adresse non trouvée"


@pytest.mark.asyncio
async def test_list_and_get_orders(
    test_client: AsyncClient, db_session: AsyncSession, consumer, other_consumer, consumer_headers, tomatoes, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 1})
    created = (await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)).json()["data"]

    response = await test_client.get(ORDERS_URL, params={"page": 1, "limit": 5}, headers=consumer_headers)
    assert response.status_code == 200
    body = response.json()
    assert [o["id"] for o in body["data"]] == [created["id"]]
    assert body["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_items": 1,
        "items_per_page": 5,
        "has_next_page": False,
        "has_prev_page": False,
    }

    response = await test_client.get(f"{ORDERS_URL}/{created['id']}", headers=consumer_headers)
    assert response.status_code == 200

    response = await test_client.get(f"{ORDERS_URL}/{created['id']}", headers=auth_headers_for(other_consumer))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_cancel_order(
    test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, tomatoes, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 3})
    order_id = (await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)).json()["data"]["id"]

    response = await test_client.put(f"{ORDERS_URL}/{order_id}/cancel", headers=consumer_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"
    assert await stock_of(db_session, tomatoes.id) == 10

    response = await test_client.put(f"{ORDERS_URL}/{order_id}/cancel", headers=consumer_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cette commande ne peut plus être annulée"


@pytest.mark.asyncio
async def test_producer_updates_status_and_lists_sales(
    test_client: AsyncClient,
    db_session: AsyncSession,
    consumer,
    consumer_headers,
    producer_headers,
    tomatoes,
    default_address,
):
    await fill_cart(db_session, consumer, {tomatoes.id: 1})
    order_id = (await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)).json()["data"]["id"]

    response = await test_client.put(
        f"{ORDERS_URL}/{order_id}/status", json={"status": "delivered"}, headers=producer_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["delivered_at"] is not None

    response = await test_client.put(
        f"{ORDERS_URL}/{order_id}/status", json={"status": "shipped"}, headers=producer_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Commande déjà finalisée"

    response = await test_client.get(f"{ORDERS_URL}/sales/my", headers=producer_headers)
    assert response.status_code == 200
    sales = response.json()["data"]
    assert [s["id"] for s in sales] == [order_id]
    assert sales[0]["buyer"]["name"] == "Claire Consommatrice"


@pytest.mark.asyncio
async def test_invalid_status_rejected(test_client: AsyncClient, producer_headers):
    response = await test_client.put(f"{ORDERS_URL}/1/status", json={"status": "cancelled"}, headers=producer_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Statut invalide"
    assert response.json()["errors"]


@pytest.mark.asyncio
async def test_roles_enforced(test_client: AsyncClient, consumer_headers, producer_headers):
    assert (await test_client.post(ORDERS_URL, json={}, headers=producer_headers)).status_code == 403
    assert (await test_client.get(f"{ORDERS_URL}/sales/my", headers=consumer_headers)).status_code == 403
    assert (await test_client.get(ORDERS_URL)).status_code == 401


@pytest.mark.asyncio
async def test_shipping_records_expected_delivery(
    test_client: AsyncClient, db_session: AsyncSession, consumer, consumer_headers, producer_headers, tomatoes, default_address
):
    await fill_cart(db_session, consumer, {tomatoes.id: 1})
    order_id = (await test_client.post(ORDERS_URL, json={}, headers=consumer_headers)).json()["data"]["id"]

    response = await test_client.put(
        f"{ORDERS_URL}/{order_id}/status",
        json={"status": "shipped", "expected_delivery_at": "2030-06-15T09:00:00+02:00"},
        headers=producer_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "shipped"
    assert data["expected_delivery_at"].startswith("2030-06-15T07:00:00")
    assert "delivered_at" not in data
