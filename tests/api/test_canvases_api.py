"""Tests for canvas endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_canvas_lifecycle(client: AsyncClient) -> None:
    response = await client.post(
        "/canvases", json={"title": "Hearing notes", "content": "<p>Day 1</p>"}
    )
    assert response.status_code == 201
    canvas = response.json()
    assert canvas["is_public"] is True

    response = await client.patch(
        f"/canvases/{canvas['id']}", json={"content": "<p>Day 2</p>"}
    )
    assert response.status_code == 200
    assert response.json()["content"] == "<p>Day 2</p>"
    assert response.json()["title"] == "Hearing notes"

    response = await client.get("/canvases")
    assert [c["id"] for c in response.json()] == [canvas["id"]]

    response = await client.delete(f"/canvases/{canvas['id']}")
    assert response.status_code == 204

    response = await client.get(f"/canvases/{canvas['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_canvas_requires_title(client: AsyncClient) -> None:
    response = await client.post("/canvases", json={"title": "  "})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_canvas_in_room(client: AsyncClient) -> None:
    room = (await client.post("/rooms", json={"name": "Case 42"})).json()
    await client.post("/canvases", json={"title": "General"})
    attached = (
        await client.post("/canvases", json={"title": "Brief", "room_id": room["id"]})
    ).json()

    response = await client.get("/canvases", params={"room_id": room["id"]})

    assert [c["id"] for c in response.json()] == [attached["id"]]

    response = await client.post(
        "/canvases", json={"title": "Lost", "room_id": "missing"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_canvas_images(client: AsyncClient) -> None:
    canvas = (await client.post("/canvases", json={"title": "Exhibits"})).json()

    response = await client.post(
        f"/canvases/{canvas['id']}/images",
        files={"file": ("photo.png", b"\x89PNG", "image/png")},
    )
    assert response.status_code == 201
    url = response.json()["url"]

    response = await client.get(f"/canvases/{canvas['id']}/images")
    assert response.json() == [{"url": url}]

    response = await client.get(url)
    assert response.status_code == 200
    assert response.content == b"\x89PNG"
    assert response.headers["content-type"] == "image/png"

    response = await client.post(
        f"/canvases/{canvas['id']}/images",
        files={"file": ("notes.txt", b"text", "text/plain")},
    )
    assert response.status_code == 422
