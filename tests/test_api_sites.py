"""
站点 / 主题 / 页面 API 测试
"""

import pytest
from httpx import AsyncClient


async def _register(client: AsyncClient, email: str = "owner@example.com") -> dict:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "pw-123456", "first_name": "Ada", "last_name": "Owner"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def _create_site(client: AsyncClient, headers: dict, domain: str = "acme.example.com") -> dict:
    response = await client.post(
        "/api/v1/sites",
        json={"name": "Acme", "domain": domain, "description": "Outdoor gear"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """测试健康检查端点"""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "sitebuilder"

    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["database"]["healthy"] is True


@pytest.mark.asyncio
async def test_login_and_me(client: AsyncClient):
    await _register(client)

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "owner@example.com", "password": "pw-123456"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "owner@example.com"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "owner@example.com", "password": "nope"},
    )
    assert response.status_code == 401
    assert response.json()["code"] == "unauthenticated"


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient):
    response = await client.get("/api/v1/sites")
    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated", "code": "unauthenticated"}


@pytest.mark.asyncio
async def test_create_site(client: AsyncClient):
    """测试创建站点：带默认主题和四个页面"""
    headers = await _register(client)
    data = await _create_site(client, headers)

    assert data["id"].startswith("site-")
    assert data["status"] == "draft"
    assert data["theme"]["is_default"] is True
    assert data["theme_id"] == data["theme"]["id"]
    assert sorted(page["path"] for page in data["pages"]) == ["/", "/about", "/contact", "/products"]
    assert {page["type"] for page in data["pages"]} == {"home", "product-listing", "about", "contact"}

    response = await client.get("/api/v1/sites", headers=headers)
    assert response.status_code == 200
    assert [site["id"] for site in response.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_create_site_duplicate_domain(client: AsyncClient):
    headers = await _register(client)
    await _create_site(client, headers)

    response = await client.post(
        "/api/v1/sites",
        json={"name": "Again", "domain": "acme.example.com"},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "duplicate_domain"

    response = await client.post("/api/v1/sites", json={"name": "No domain"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_public_lookup_by_domain(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.get("/api/v1/sites/domain/acme.example.com")
    assert response.status_code == 200
    assert response.json()["id"] == site["id"]

    response = await client.get(f"/api/v1/sites/{site['id']}/pages/by-path", params={"path": "/about"})
    assert response.status_code == 200
    assert response.json()["type"] == "about"

    response = await client.get(f"/api/v1/sites/{site['id']}/themes/default")
    assert response.status_code == 200
    assert response.json()["id"] == site["theme_id"]

    response = await client.get("/api/v1/sites/domain/unknown.example.com")
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


@pytest.mark.asyncio
async def test_other_user_forbidden(client: AsyncClient):
    owner_headers = await _register(client)
    site = await _create_site(client, owner_headers)
    stranger_headers = await _register(client, "stranger@example.com")

    response = await client.get(f"/api/v1/sites/{site['id']}", headers=stranger_headers)
    assert response.status_code == 403

    response = await client.patch(
        f"/api/v1/sites/{site['id']}",
        json={"name": "Mine now"},
        headers=stranger_headers,
    )
    assert response.status_code == 403

    response = await client.delete(f"/api/v1/sites/{site['id']}", headers=stranger_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_menu_and_status(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.put(
        f"/api/v1/sites/{site['id']}/menu",
        json={"menu_items": "Home"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Menu items must be an array"

    response = await client.put(
        f"/api/v1/sites/{site['id']}/menu",
        json={"menu_items": [{"label": "Shop", "url": "/shop"}]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["navigation"]["header_menu_items"][0]["label"] == "Shop"

    response = await client.put(
        f"/api/v1/sites/{site['id']}/status",
        json={"status": "published"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "published"


@pytest.mark.asyncio
async def test_page_lifecycle(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.post(
        "/api/v1/pages",
        json={
            "site_id": site["id"],
            "name": "Landing",
            "path": "/landing",
            "type": "landing",
            "components": [{"type": "hero", "children": [{"type": "text", "props": {"content": "Hi"}}]}],
        },
        headers=headers,
    )
    assert response.status_code == 201
    page = response.json()
    assert page["type"] == "landing"
    assert page["components"][0]["children"][0]["props"] == {"content": "Hi"}

    response = await client.post(
        "/api/v1/pages",
        json={"site_id": site["id"], "name": "Dup", "path": "/landing", "type": "custom"},
        headers=headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "duplicate_path"

    response = await client.post(
        "/api/v1/pages",
        json={
            "site_id": site["id"],
            "name": "Broken",
            "path": "/broken",
            "type": "custom",
            "components": [{"type": "grid", "layout": {"w": 0}}],
        },
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_component"

    response = await client.post(f"/api/v1/pages/{page['id']}/toggle-published", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_published"] is True
    assert response.json()["published_at"] is not None

    response = await client.post(
        f"/api/v1/pages/{page['id']}/clone",
        json={"name": "Landing B", "path": "/landing-b"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["components"] == page["components"]
    assert response.json()["is_published"] is False

    response = await client.get(
        f"/api/v1/sites/{site['id']}/pages",
        params={"published": "false"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["total"] == 1
    assert response.json()["pages"][0]["path"] == "/landing-b"


@pytest.mark.asyncio
async def test_default_page_cannot_be_deleted(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)
    home = next(page for page in site["pages"] if page["is_default"])
    about = next(page for page in site["pages"] if page["path"] == "/about")

    response = await client.delete(f"/api/v1/pages/{home['id']}", headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "default_page_protected"

    response = await client.post(f"/api/v1/pages/{about['id']}/default", headers=headers)
    assert response.status_code == 200

    response = await client.delete(f"/api/v1/pages/{home['id']}", headers=headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_patch_page_null_fields(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.post(
        "/api/v1/pages",
        json={"site_id": site["id"], "name": "Landing", "path": "/landing", "type": "landing"},
        headers=headers,
    )
    assert response.status_code == 201
    page = response.json()

    response = await client.patch(f"/api/v1/pages/{page['id']}", json={"seo": None}, headers=headers)
    assert response.status_code == 200
    assert response.json()["seo"] == {}

    response = await client.patch(
        f"/api/v1/pages/{page['id']}", json={"is_published": None}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"

    response = await client.get(f"/api/v1/pages/{page['id']}", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_published"] is False
    assert response.json()["seo"] == {}


@pytest.mark.asyncio
async def test_theme_default_switch(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)
    original_id = site["theme_id"]

    response = await client.post(
        f"/api/v1/themes/{original_id}/clone",
        json={"name": "Holiday"},
        headers=headers,
    )
    assert response.status_code == 201
    holiday = response.json()
    assert holiday["is_default"] is False

    response = await client.delete(f"/api/v1/themes/{original_id}", headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "default_theme_protected"

    response = await client.post(f"/api/v1/themes/{holiday['id']}/default", headers=headers)
    assert response.status_code == 200
    assert response.json()["is_default"] is True

    response = await client.get(f"/api/v1/sites/{site['id']}", headers=headers)
    assert response.json()["theme_id"] == holiday["id"]

    response = await client.get(f"/api/v1/sites/{site['id']}/themes", headers=headers)
    assert [theme["is_default"] for theme in response.json()].count(True) == 1

    response = await client.delete(f"/api/v1/themes/{original_id}", headers=headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_site(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.delete(f"/api/v1/sites/{site['id']}", headers=headers)
    assert response.status_code == 204

    response = await client.get(f"/api/v1/sites/{site['id']}", headers=headers)
    assert response.status_code == 404
    response = await client.get(f"/api/v1/sites/{site['id']}/themes/default")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_publish_and_archive_shortcuts(client: AsyncClient):
    headers = await _register(client)
    site = await _create_site(client, headers)

    response = await client.post(f"/api/v1/sites/{site['id']}/publish", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "published"

    response = await client.post(f"/api/v1/sites/{site['id']}/archive", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "archived"


@pytest.mark.asyncio
async def test_password_reset_flow(client: AsyncClient, notifier):
    await _register(client)

    response = await client.post("/api/v1/auth/forgot-password", json={"email": "owner@example.com"})
    assert response.status_code == 200
    token = notifier.sent[0]["body"].rsplit("/reset-password/", 1)[1]

    response = await client.post(f"/api/v1/auth/reset-password/{token}", json={"password": "fresh-pass"})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "owner@example.com"

    response = await client.post(
        "/api/v1/auth/login",
        json={"email": "owner@example.com", "password": "fresh-pass"},
    )
    assert response.status_code == 200
