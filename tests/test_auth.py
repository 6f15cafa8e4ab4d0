"""
Tests de autenticación y usuarios.
"""

from agenda.auth.jwt import create_refresh_token
from agenda.models.user import User
from tests.helpers import auth_headers

API = "/api/v1"


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_login_returns_tokens(client, admin_user: User):
    response = await client.post(
        f"{API}/auth/login",
        json={"email": "admin@test.com", "password": "TestPass123"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "Administrador"
    assert body["user"]["full_name"] == "Ana Admin"
    assert body["tokens"]["access_token"]
    assert body["tokens"]["refresh_token"]

    me = await client.get(
        f"{API}/auth/me",
        headers={"Authorization": f"Bearer {body['tokens']['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["email"] == "admin@test.com"


async def test_login_with_wrong_password(client, admin_user: User):
    response = await client.post(
        f"{API}/auth/login",
        json={"email": "admin@test.com", "password": "incorrecta123"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Email o contraseña incorrectos"


async def test_refresh_issues_new_pair(client, paciente_user: User):
    response = await client.post(
        f"{API}/auth/refresh",
        json={"refresh_token": create_refresh_token(paciente_user.id)},
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


async def test_refresh_token_is_not_an_access_token(client, paciente_user: User):
    token = create_refresh_token(paciente_user.id)
    response = await client.get(
        f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


async def test_invalid_token(client, setup_database):
    response = await client.get(
        f"{API}/auth/me", headers={"Authorization": "Bearer no-es-un-jwt"}
    )
    assert response.status_code == 401


async def test_admin_creates_user(client, admin_user: User):
    response = await client.post(
        f"{API}/usuarios",
        json={
            "email": "nuevo.terapeuta@test.com",
            "password": "Secreta123",
            "first_name": "Nora",
            "last_name": "Núñez",
            "role": "Terapeuta",
        },
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "Terapeuta"
    assert body["full_name"] == "Nora Núñez"
    assert body["is_active"] is True


async def test_duplicate_email_conflicts(client, admin_user: User, paciente_user: User):
    response = await client.post(
        f"{API}/usuarios",
        json={
            "email": "paciente@test.com",
            "password": "Secreta123",
            "first_name": "Otra",
            "last_name": "Persona",
        },
        headers=auth_headers(admin_user),
    )
    assert response.status_code == 409


async def test_only_admin_creates_users(client, terapeuta_user: User):
    response = await client.post(
        f"{API}/usuarios",
        json={
            "email": "x@test.com",
            "password": "Secreta123",
            "first_name": "Equis",
            "last_name": "Persona",
        },
        headers=auth_headers(terapeuta_user),
    )
    assert response.status_code == 403


async def test_active_users_by_role(
    client, admin_user: User, terapeuta_user: User, paciente_user: User
):
    response = await client.get(
        f"{API}/usuarios/activos",
        params={"rol": "Terapeuta"},
        headers=auth_headers(paciente_user),
    )
    assert response.status_code == 200
    assert response.json() == [
        {"id": terapeuta_user.id, "full_name": "Tomás Terapeuta", "role": "Terapeuta"}
    ]

    everyone = await client.get(f"{API}/usuarios/activos", headers=auth_headers(paciente_user))
    assert len(everyone.json()) == 3
