import pytest
from admin_registry import main
from admin_registry import registry as registry_module
from admin_registry.registry import AdminRegistry
from admin_registry.schemas import DashboardCard, NavItem, QuickAction
from fastapi.testclient import TestClient

pytestmark = pytest.mark.unit


def test_health_reports_registration_counts(admin_client):
    response = admin_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["registrations"]["nav_item"] == 1
    assert body["registrations"]["dashboard_card"] == 0


def test_create_app_loads_builtin_modules(admin_client):
    response = admin_client.get("/api/v1/admin-extensions/nav")
    assert response.status_code == 200
    assert [item["label"] for item in response.json()] == ["Dashboard"]


def test_create_app_without_module_loading(registry, settings):
    app = main.create_app(
        registry, settings=settings, is_admin=lambda _r: True, load_modules=False
    )
    response = TestClient(app).get("/api/v1/admin-extensions/nav")
    assert response.json() == []


def test_create_app_initializes_application_registry(settings):
    app = main.create_app(settings=settings)
    assert app.state.registry is registry_module.get_registry()
    assert isinstance(app.state.registry, AdminRegistry)


def test_default_gate_denies_everyone(anonymous_client):
    response = anonymous_client.get("/api/v1/admin-extensions/manifest")
    assert response.status_code == 403
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["error_code"] == "admin_required"


def test_gate_is_consulted_per_request(registry, settings):
    app = main.create_app(
        registry,
        settings=settings,
        is_admin=lambda request: request.headers.get("x-role") == "admin",
    )
    client = TestClient(app)
    assert client.get("/api/v1/admin-extensions/nav").status_code == 403
    assert (
        client.get("/api/v1/admin-extensions/nav", headers={"x-role": "admin"}).status_code
        == 200
    )


def test_collections_are_served_sorted(admin_client, registry):
    registry.register_nav_item(
        "users", NavItem(label="Users", path="/admin/users", category="user_management")
    )
    registry.register_dashboard_card("reports", DashboardCard(id="revenue", order=20))
    registry.register_dashboard_card("reports", DashboardCard(id="signups", order=10, widget="chart"))
    registry.register_admin_view("reports", {"id": "reports", "path": "/admin/reports"})
    registry.register_quick_action("codes", QuickAction(id="new-code", label="New code"))

    nav = admin_client.get("/api/v1/admin-extensions/nav").json()
    assert [item["label"] for item in nav] == ["Dashboard", "Users"]

    categorized = admin_client.get("/api/v1/admin-extensions/nav/categorized").json()
    assert [item["label"] for item in categorized["user_management"]] == ["Users"]
    assert [item["label"] for item in categorized["dashboard"]] == ["Dashboard"]
    assert categorized["game"] == []

    cards = admin_client.get("/api/v1/admin-extensions/dashboard-cards").json()
    assert [card["id"] for card in cards] == ["signups", "revenue"]
    assert cards[0]["widget"] == "chart"

    views = admin_client.get("/api/v1/admin-extensions/views").json()
    assert views[0]["path"] == "/admin/reports"

    actions = admin_client.get("/api/v1/admin-extensions/quick-actions").json()
    assert actions[0]["kind"] == "quick_action"


def test_manifest_reflects_latest_state(admin_client, registry):
    before = admin_client.get("/api/v1/admin-extensions/manifest").json()
    assert [item["label"] for item in before["nav_items"]] == ["Dashboard"]

    registry.unregister_nav_item("Dashboard")
    registry.register_quick_action("codes", {"id": "new-code", "label": "New code"})

    after = admin_client.get("/api/v1/admin-extensions/manifest").json()
    assert after["nav_items"] == []
    assert [action["id"] for action in after["quick_actions"]] == ["new-code"]
    assert set(after["categorized_nav_items"]) == {
        "dashboard",
        "user_management",
        "content",
        "events",
        "game",
        "system",
        "other",
    }


def test_create_app_twice_reuses_application_registry(settings):
    first = main.create_app(settings=settings)
    second = main.create_app(settings=settings)

    assert second.state.registry is first.state.registry
    response = TestClient(second).get("/health")
    assert response.json()["registrations"]["nav_item"] == 1


def test_create_app_twice_with_explicit_registry(registry, settings):
    main.create_app(registry, settings=settings)
    app = main.create_app(registry, settings=settings, is_admin=lambda _r: True)

    nav = TestClient(app).get("/api/v1/admin-extensions/nav").json()
    assert [item["label"] for item in nav] == ["Dashboard"]


def test_module_level_app_is_built_once(monkeypatch):
    monkeypatch.setattr(main, "_app", None)

    app = main.app

    assert app is main.app
    assert app.state.registry is registry_module.get_registry()
    with pytest.raises(AttributeError):
        main.not_an_attribute
