import itertools

import pytest
from sqlalchemy import text

from roledesk import role_gate
from roledesk.enums import UserType
from roledesk.main import is_no_cache_path

pytestmark = pytest.mark.integration

DASHBOARDS = {
    UserType.ADMIN: ("/admin/dashboard", "Admin Dashboard"),
    UserType.MANAGER: ("/manager/dashboard", "Manager Dashboard"),
    UserType.USER: ("/user/dashboard", "User Dashboard"),
}


def test_admin_opens_admin_dashboard(client, login, seeded_users):
    login("admin@example.com")

    response = client.get("/admin/dashboard")

    assert response.status_code == 200
    assert "Admin Dashboard" in response.text
    assert "admin@example.com" in response.text


def test_user_is_forbidden_from_admin_dashboard(client, login, seeded_users):
    login("user@example.com")

    response = client.get("/admin/dashboard")

    assert response.status_code == 403
    assert "Admin Dashboard" not in response.text


def test_anonymous_is_unauthenticated_not_forbidden(client, seeded_users):
    response = client.get("/manager/dashboard")

    assert response.status_code == 401
    assert response.json() == {"detail": "Not authenticated"}


def test_manager_can_open_profile(client, login, seeded_users):
    login("manager@example.com")

    response = client.get("/profile")

    assert response.status_code == 200
    assert "manager@example.com" in response.text


@pytest.mark.parametrize("identity,target", list(itertools.product([None] + list(UserType), UserType)))
def test_every_identity_against_every_group(client, login, seeded_users, identity, target):
    if identity is not None:
        login(f"{identity.value}@example.com")
    path, marker = DASHBOARDS[target]

    response = client.get(path)

    if identity is None:
        assert response.status_code == 401
    elif identity is target:
        assert response.status_code == 200
        assert marker in response.text
    else:
        assert response.status_code == 403
    if response.status_code != 200:
        assert marker not in response.text


def test_admin_dashboard_shows_counts(client, login, seeded_users, make_user):
    make_user("second@example.com", UserType.USER)
    login("admin@example.com")

    response = client.get("/admin/dashboard")

    assert "<td>user</td><td>2</td>" in response.text
    assert "<td>admin</td><td>1</td>" in response.text


def test_corrupt_type_is_forbidden_everywhere(client, login, seeded_users, db_session):
    login("admin@example.com")
    db_session.execute(text("UPDATE users SET type = 'root' WHERE email = 'admin@example.com'"))
    db_session.commit()

    for path, _ in DASHBOARDS.values():
        assert client.get(path).status_code == 403


def test_rejection_is_audited(client, login, seeded_users, monkeypatch):
    events = []
    monkeypatch.setattr(role_gate, "audit", lambda event, user_id=None, details=None: events.append((event, details)))
    login("manager@example.com")

    client.get("/user/dashboard")

    assert events == [("role_gate_rejected", "required=user;reason=forbidden")]


def test_html_client_gets_login_prompt(client, seeded_users):
    response = client.get("/admin/dashboard", headers={"accept": "text/html"})

    assert response.status_code == 401
    assert "Authentication required" in response.text
    assert 'href="/login"' in response.text


def test_html_client_gets_access_denied_page(client, login, seeded_users):
    login("manager@example.com")

    response = client.get("/admin/dashboard", headers={"accept": "text/html"})

    assert response.status_code == 403
    assert "Access denied" in response.text
    assert "Admin Dashboard" not in response.text


def test_gated_pages_are_not_cached(client, login, seeded_users):
    login("user@example.com")

    response = client.get("/user/dashboard")

    assert response.headers["cache-control"].startswith("no-store")


@pytest.mark.parametrize("path", ["/users", "/profile-photos", "/administrator"])
def test_sibling_paths_keep_default_caching(client, path):
    response = client.get(path)

    assert response.status_code == 404
    assert "cache-control" not in response.headers


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/user", True),
        ("/user/dashboard", True),
        ("/profile", True),
        ("/users", False),
        ("/profile-photos", False),
        ("/", False),
    ],
)
def test_no_cache_matches_whole_path_segments(path, expected):
    assert is_no_cache_path(path) is expected


def test_request_id_is_echoed(client):
    response = client.get("/", headers={"x-request-id": "abc-123"})

    assert response.status_code == 200
    assert response.headers["x-request-id"] == "abc-123"
    assert "cache-control" not in response.headers


def test_groups_are_registered_once_each(app):
    assert [(g.prefix, g.required) for g in app.state.role_groups] == [
        ("/admin", UserType.ADMIN),
        ("/manager", UserType.MANAGER),
        ("/user", UserType.USER),
    ]
