"""Integration tests for registration, email validation, profiles and welcome emails."""

from app.models.profile import Profile, UserRole
from app.models.user import User
from tests.conftest import (
    TestingSessionLocal,
    auth_headers,
    login_user,
    profile_id_for,
    register_user,
)


# ===== Registration =====


def test_registration_creates_free_profile(client):
    resp = register_user(client, email="new.member@acme.com", first_name="Ana", last_name="Ruiz", company="Acme")
    assert resp.status_code == 201
    assert resp.json()["email"] == "new.member@acme.com"

    db = TestingSessionLocal()
    try:
        user = db.query(User).filter(User.email == "new.member@acme.com").first()
        profile = db.query(Profile).filter(Profile.user_id == user.id).first()
        assert profile.role == UserRole.FREE
        assert profile.first_name == "Ana"
        assert profile.company == "Acme"
    finally:
        db.close()


def test_registration_duplicate_email(client):
    assert register_user(client, email="dup@acme.com").status_code == 201
    second = register_user(client, email="dup@acme.com")
    assert second.status_code == 400
    assert "already exists" in second.json()["detail"]


def test_registration_rejects_short_password(client):
    resp = register_user(client, password="short")
    assert resp.status_code == 400


def test_login_with_wrong_password(client):
    register_user(client, email="login@acme.com")
    resp = login_user(client, "login@acme.com", password="WrongPass123!")
    assert resp.status_code == 400


# ===== Email validation =====


def test_validate_email_accepts_corporate_address(client):
    resp = client.post("/api/v1/auth/validate-email", json={"email": "ciso@acme.com"})
    assert resp.status_code == 200
    assert resp.json() == {"isValid": True, "reason": None}


def test_validate_email_reports_reason(client):
    resp = client.post("/api/v1/auth/validate-email", json={"email": "someone@yahoo.com"})
    assert resp.json() == {"isValid": False, "reason": "Please use your corporate email address"}

    resp = client.post("/api/v1/auth/validate-email", json={})
    assert resp.json() == {"isValid": False, "reason": "Email is required"}


def test_validate_email_rejects_malformed_domains_and_non_strings(client):
    for value in ("ciso@acme..com", "ciso@-acme.com", 123):
        resp = client.post("/api/v1/auth/validate-email", json={"email": value})
        assert resp.status_code == 200
        assert resp.json() == {"isValid": False, "reason": "Invalid email address format"}


# ===== Profiles =====


def test_read_my_profile(client):
    headers, email = auth_headers(client, first_name="Lia")
    resp = client.get("/api/v1/profiles/me", headers=headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == email
    assert body["role"] == "FREE"
    assert body["firstName"] == "Lia"
    assert body["id"] == profile_id_for(email)


def test_profile_requires_session(client):
    assert client.get("/api/v1/profiles/me").status_code == 401


def test_superadmin_can_change_roles(client):
    admin_headers, _ = auth_headers(client, role=UserRole.SUPERADMIN)
    _, member_email = auth_headers(client)
    target = profile_id_for(member_email)

    resp = client.patch(f"/api/v1/profiles/{target}/role", json={"role": "premium"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["role"] == "PREMIUM"
    assert resp.json()["email"] == member_email


def test_role_change_rejected_for_non_admin(client):
    headers, email = auth_headers(client, role=UserRole.PREMIUM)
    resp = client.patch(f"/api/v1/profiles/{profile_id_for(email)}/role", json={"role": "SUPERADMIN"}, headers=headers)
    assert resp.status_code == 403


def test_role_change_validates_role_and_target(client):
    admin_headers, admin_email = auth_headers(client, role=UserRole.SUPERADMIN)
    bad_role = client.patch(f"/api/v1/profiles/{profile_id_for(admin_email)}/role", json={"role": "OWNER"}, headers=admin_headers)
    assert bad_role.status_code == 400
    missing = client.patch("/api/v1/profiles/nope/role", json={"role": "FREE"}, headers=admin_headers)
    assert missing.status_code == 404


# ===== Welcome email =====


def test_welcome_email_sent_once_per_window(client, notifier):
    headers, email = auth_headers(client, first_name="Lia")
    first = client.post("/api/v1/notifications/welcome", headers=headers)
    assert first.status_code == 200
    assert first.json()["sent"] is True
    assert notifier.calls == [{"to_email": email, "first_name": "Lia"}]

    second = client.post("/api/v1/notifications/welcome", headers=headers)
    assert second.json() == {"sent": False, "message": "Email already sent recently"}
    assert len(notifier.calls) == 1


def test_welcome_email_failure_is_reported(client, notifier):
    headers, _ = auth_headers(client)
    notifier.fail = True
    resp = client.post("/api/v1/notifications/welcome", headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Email service error"}

    # A failed send is not recorded, so a retry goes through.
    notifier.fail = False
    retry = client.post("/api/v1/notifications/welcome", headers=headers)
    assert retry.status_code == 200
    assert retry.json()["sent"] is True


def test_health_reports_database(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["service"] == "simple-api"
