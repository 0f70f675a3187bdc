"""API endpoint tests for health and authentication."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from jose import jwt

from src.config import get_settings
from src.models.user import User
from src.services.auth import create_access_token, create_reset_token


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_register_user(client):
    """Test user registration."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "newuser@example.com", "password": "password123", "name": "New User"},
    )
    assert response.status_code == 201
    data = response.json()
    assert "access_token" in data
    assert data["user"]["email"] == "newuser@example.com"
    assert data["user"]["name"] == "New User"


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": auth_headers.email, "password": "password123", "name": "Duplicate"},
    )
    assert response.status_code == 400
    assert "already registered" in response.json()["detail"]


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    assert response.json()["user"]["id"] == auth_headers.user_id


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401


def test_get_current_user(client, auth_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email


def test_unauthorized_access(client):
    """Test that generation endpoints require authentication."""
    assert client.get("/api/v1/text-generation/sessions").status_code == 401
    assert client.post("/api/v1/text-to-image", json={"prompt": "cat"}).status_code == 401
    assert client.delete("/api/v1/text-generation/1").status_code == 401


def test_malformed_token_rejected(client):
    """Test that a garbage bearer token is rejected."""
    response = client.get(
        "/api/v1/text-generation/sessions", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_expired_token_rejected(client, auth_headers):
    """Test that an expired access token is rejected."""
    settings = get_settings()
    token = jwt.encode(
        {
            "sub": str(auth_headers.user_id),
            "type": "access",
            "exp": datetime.now(UTC) - timedelta(minutes=1),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_without_user_id_rejected(client):
    """Test that a valid token lacking a user id is rejected."""
    settings = get_settings()
    token = jwt.encode(
        {"type": "access", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert "Missing userId" in response.json()["detail"]


def test_token_for_deleted_user_rejected(client):
    """Test that a token for a non-existent user is rejected."""
    token = create_access_token(999999, "ghost@example.com")
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_reset_token_is_not_an_access_token(client, auth_headers):
    """Test that a password reset token cannot authenticate requests."""
    token = create_reset_token(auth_headers.email)
    response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_forgot_password_unknown_email(client):
    """Test forgot password with an unregistered email."""
    with patch("src.api.auth.send_password_reset_email.delay") as mock_task:
        response = client.post(
            "/api/v1/auth/forgot-password", json={"email": "nobody@example.com"}
        )
    assert response.status_code == 404
    mock_task.assert_not_called()


def test_forgot_and_reset_password(client, db, auth_headers):
    """Test the full password reset flow."""
    with patch("src.api.auth.send_password_reset_email.delay") as mock_task:
        response = client.post(
            "/api/v1/auth/forgot-password", json={"email": auth_headers.email}
        )
    assert response.status_code == 200
    mock_task.assert_called_once()
    email, token = mock_task.call_args.args
    assert email == auth_headers.email

    user = db.query(User).filter(User.email == auth_headers.email).first()
    assert user.reset_token == token

    response = client.post(
        "/api/v1/auth/reset-password", json={"token": token, "new_password": "brandnew456"}
    )
    assert response.status_code == 200

    db.refresh(user)
    assert user.reset_token is None

    # Old password no longer works, new one does
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 401
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "brandnew456"}
    )
    assert response.status_code == 200

    # Token cannot be redeemed twice
    response = client.post(
        "/api/v1/auth/reset-password", json={"token": token, "new_password": "another789"}
    )
    assert response.status_code == 400


def test_reset_password_invalid_token(client):
    """Test reset password with an invalid token."""
    response = client.post(
        "/api/v1/auth/reset-password", json={"token": "bogus", "new_password": "brandnew456"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired token"


def test_reset_password_requires_outstanding_token(client, auth_headers):
    """Test that a validly signed but never issued token is rejected."""
    token = create_reset_token(auth_headers.email)
    response = client.post(
        "/api/v1/auth/reset-password", json={"token": token, "new_password": "brandnew456"}
    )
    assert response.status_code == 400


def test_default_database_url_uses_psycopg2():
    """Test that the default database URL names the installed driver."""
    from src.config import Settings

    assert Settings.model_fields["database_url"].default.startswith("postgresql+psycopg2://")
