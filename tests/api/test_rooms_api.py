"""Tests for room endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_get_delete_room(client: AsyncClient) -> None:
    response = await client.post("/rooms", json={"name": "Smith v. Jones"})
    assert response.status_code == 201
    room = response.json()
    assert room["type"] == "normal"

    response = await client.get(f"/rooms/{room['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Smith v. Jones"

    response = await client.get("/rooms")
    assert [r["id"] for r in response.json()] == [room["id"]]

    response = await client.delete(f"/rooms/{room['id']}")
    assert response.status_code == 204

    response = await client.get(f"/rooms/{room['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_room_requires_name(client: AsyncClient) -> None:
    response = await client.post("/rooms", json={"name": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_documents(client: AsyncClient) -> None:
    room = (await client.post("/rooms", json={"name": "Case 42"})).json()

    response = await client.post(
        f"/rooms/{room['id']}/documents",
        files={"file": ("brief.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert response.status_code == 201
    url = response.json()["url"]
    assert url.endswith(f"{room['id']}/brief.pdf")

    response = await client.get(f"/rooms/{room['id']}/documents")
    assert response.json() == [{"url": url}]

    response = await client.get(url)
    assert response.status_code == 200
    assert response.content == b"%PDF-1.4"
    assert response.headers["content-type"] == "application/pdf"

    response = await client.delete(f"/rooms/{room['id']}/documents/brief.pdf")
    assert response.status_code == 204
    assert (await client.get(url)).status_code == 404

    response = await client.delete(f"/rooms/{room['id']}/documents/brief.pdf")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_documents_unknown_room(client: AsyncClient) -> None:
    response = await client.post(
        "/rooms/missing/documents",
        files={"file": ("brief.pdf", b"%PDF", "application/pdf")},
    )
    assert response.status_code == 404

