"""
站点注册表测试
"""

import pytest

from sitebuilder.core.exceptions import DuplicateDomain, NotFound, ValidationError


@pytest.mark.asyncio
async def test_create_site(db_session, services, owner):
    site = await services.registry.create(
        db_session,
        owner.id,
        "  Acme  ",
        "Acme.Example.com",
        description="Outdoor gear",
        logo_url="https://cdn.example.com/logo.png",
    )

    assert site.id.startswith("site-")
    assert site.name == "Acme"
    assert site.domain == "acme.example.com"
    assert site.status == "draft"
    assert site.theme_id is None
    assert [item["label"] for item in site.navigation["header_menu_items"]] == [
        "Home",
        "Products",
        "About",
        "Contact",
    ]
    assert site.navigation["footer_sections"][0]["heading"] == "Company"
    assert site.settings["logo"] == "https://cdn.example.com/logo.png"
    assert site.settings["currency"] == {"code": "USD", "symbol": "$", "position": "prefix"}


@pytest.mark.asyncio
async def test_create_requires_fields(db_session, services, owner):
    with pytest.raises(ValidationError, match="domain"):
        await services.registry.create(db_session, owner.id, "Acme", "")

    with pytest.raises(ValidationError, match="name"):
        await services.registry.create(db_session, owner.id, None, "acme.example.com")


@pytest.mark.asyncio
async def test_duplicate_domain(db_session, services, owner, user_factory):
    """域名全局唯一，不区分大小写"""
    await services.registry.create(db_session, owner.id, "Acme", "acme.example.com")
    someone_else = await user_factory("other@example.com")

    with pytest.raises(DuplicateDomain):
        await services.registry.create(db_session, someone_else.id, "Copycat", "ACME.example.com")

    assert len(await services.registry.list_by_owner(db_session, someone_else.id)) == 0


@pytest.mark.asyncio
async def test_update_strips_owner(db_session, services, site, user_factory):
    intruder = await user_factory("intruder@example.com")

    updated = await services.registry.update(
        db_session,
        site.id,
        {"owner_id": intruder.id, "owner": intruder.id, "name": "Renamed", "description": "New"},
    )

    assert updated.owner_id != intruder.id
    assert updated.name == "Renamed"
    assert updated.description == "New"


@pytest.mark.asyncio
async def test_update_domain_uniqueness(db_session, services, owner, site):
    await services.registry.create(db_session, owner.id, "Taken", "taken.example.com")

    with pytest.raises(DuplicateDomain):
        await services.registry.update(db_session, site.id, {"domain": "taken.example.com"})

    # 改成自己当前的域名不算冲突
    updated = await services.registry.update(db_session, site.id, {"domain": "BLANK.example.com"})
    assert updated.domain == "blank.example.com"


@pytest.mark.asyncio
async def test_update_theme_must_belong_to_site(db_session, services, owner, site):
    other = await services.registry.create(db_session, owner.id, "Other", "other.example.com")
    foreign = await services.themes.create(db_session, other.id, "Foreign")
    own = await services.themes.create(db_session, site.id, "Own")

    with pytest.raises(ValidationError, match="does not belong"):
        await services.registry.update(db_session, site.id, {"theme_id": foreign.id})

    with pytest.raises(NotFound):
        await services.registry.update(db_session, site.id, {"theme_id": "thm-missing"})

    updated = await services.registry.attach_theme(db_session, site.id, own.id)
    assert updated.theme_id == own.id


@pytest.mark.asyncio
async def test_update_validates_settings_and_status(db_session, services, site):
    with pytest.raises(ValidationError):
        await services.registry.update(db_session, site.id, {"status": "deleted"})

    with pytest.raises(ValidationError, match="currency"):
        await services.registry.update(
            db_session, site.id, {"settings": {"currency": {"position": "middle"}}}
        )

    updated = await services.registry.update(
        db_session,
        site.id,
        {"settings": {"enable_search": False, "social_links": [{"name": "X", "url": "https://x.com/acme"}]}},
    )
    assert updated.settings["enable_search"] is False
    assert updated.settings["show_cart_icon"] is True
    assert updated.settings["social_links"][0]["url"] == "https://x.com/acme"


@pytest.mark.asyncio
async def test_update_menu(db_session, services, site):
    with pytest.raises(ValidationError, match="must be an array"):
        await services.registry.update_menu(db_session, site.id, {"label": "Home"})

    with pytest.raises(ValidationError, match="label and url"):
        await services.registry.update_menu(db_session, site.id, [{"label": "Home"}])

    updated = await services.registry.update_menu(
        db_session,
        site.id,
        [
            {"label": "Shop", "url": "/shop", "children": [{"label": "Sale", "url": "/sale"}]},
            {"label": "Blog", "url": "https://blog.example.com", "is_external": True},
        ],
    )

    items = updated.navigation["header_menu_items"]
    assert [item["label"] for item in items] == ["Shop", "Blog"]
    assert items[0]["children"][0]["url"] == "/sale"
    assert items[1]["is_external"] is True
    # 页脚不受影响
    assert updated.navigation["footer_sections"][0]["heading"] == "Company"


@pytest.mark.asyncio
async def test_update_status(db_session, services, site):
    with pytest.raises(ValidationError, match="Valid status is required"):
        await services.registry.update_status(db_session, site.id, "live")

    updated = await services.registry.update_status(db_session, site.id, "published")
    assert updated.status == "published"


@pytest.mark.asyncio
async def test_lookup(db_session, services, site):
    resolved = await services.registry.get_by_domain(db_session, "blank.example.com")
    assert resolved.site.id == site.id
    assert resolved.theme is None
    assert resolved.pages == []

    with pytest.raises(NotFound):
        await services.registry.get_by_domain(db_session, "missing.example.com")

    with pytest.raises(NotFound):
        await services.registry.get_by_id(db_session, "site-missing")


@pytest.mark.asyncio
async def test_update_null_fields(db_session, services, site):
    with pytest.raises(ValidationError, match="Valid status"):
        await services.registry.update(db_session, site.id, {"status": None})

    with pytest.raises(ValidationError, match="name"):
        await services.registry.update(db_session, site.id, {"name": None})

    await db_session.refresh(site)
    assert site.status == "draft"
    assert site.name == "Blank"

    updated = await services.registry.update(db_session, site.id, {"settings": None})
    assert updated.settings["enable_search"] is True
    assert updated.settings["currency"]["code"] == "USD"
