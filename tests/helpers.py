"""
Small HTTP helpers shared by the API tests.
"""

import httpx


async def signup(client: httpx.AsyncClient, username: str, password: str = "pw", **extra) -> dict:
    resp = await client.post(
        "/api/signup", json={"username": username, "password": password, **extra},
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
