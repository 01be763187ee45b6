# tests/domains/test_user_credentials.py

"""
'usr' 도메인의 자격증명 (`/user-credentials`) API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.
"""

import json

import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.security import verify_password
from app.domains.usr import models as usr_models


async def _stored_credentials(db_session: AsyncSession, user_id: str) -> usr_models.UserCredentials:
    result = await db_session.execute(
        select(usr_models.UserCredentials).where(usr_models.UserCredentials.user_id == user_id)
    )
    return result.scalar_one()


@pytest.mark.asyncio
async def test_create_credentials_stores_hash(client: AsyncClient, user_factory, db_session: AsyncSession):
    await user_factory("alan@example.com")

    response = await client.post("/user-credentials", json={"userId": "alan@example.com", "password": "enigma1234"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"id", "userId"}
    assert body["userId"] == "alan@example.com"

    stored = await _stored_credentials(db_session, "alan@example.com")
    assert stored.id == body["id"]
    assert stored.password != "enigma1234"
    assert verify_password("enigma1234", stored.password)


@pytest.mark.asyncio
async def test_create_credentials_for_missing_user(client: AsyncClient):
    response = await client.post("/user-credentials", json={"userId": "ghost@example.com", "password": "pw"})

    assert response.status_code == 400
    assert response.json()["detail"] == "userId 'ghost@example.com' does not reference an existing user"


@pytest.mark.asyncio
async def test_create_second_credentials_for_same_user(client: AsyncClient, test_user: usr_models.User):
    response = await client.post("/user-credentials", json={"userId": test_user.email, "password": "another"})

    assert response.status_code == 400
    assert response.json()["detail"] == f"User '{test_user.email}' already has credentials"


@pytest.mark.asyncio
async def test_find_credentials_never_returns_password(client: AsyncClient, test_user: usr_models.User):
    response = await client.get("/user-credentials")

    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["userId"] == test_user.email
    assert "password" not in rows[0]

    by_id = await client.get(f"/user-credentials/{rows[0]['id']}")
    assert by_id.status_code == 200
    assert "password" not in by_id.json()


@pytest.mark.asyncio
async def test_credentials_cannot_be_filtered_by_password(client: AsyncClient, test_user: usr_models.User):
    response = await client.get("/user-credentials/count", params={"where": json.dumps({"password": "x"})})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_count_and_filter_credentials(client: AsyncClient, user_factory):
    await user_factory("a@example.com", "password-a")
    await user_factory("b@example.com", "password-b")

    count = await client.get("/user-credentials/count", params={"where": json.dumps({"userId": "a@example.com"})})
    assert count.json() == {"count": 1}

    flt = {"order": "userId DESC", "limit": 1}
    rows = (await client.get("/user-credentials", params={"filter": json.dumps(flt)})).json()
    assert [r["userId"] for r in rows] == ["b@example.com"]


@pytest.mark.asyncio
async def test_find_credentials_by_id_not_found(client: AsyncClient):
    response = await client.get("/user-credentials/does-not-exist")

    assert response.status_code == 404
    assert response.json()["detail"] == "UserCredentials not found"


@pytest.mark.asyncio
async def test_update_credentials_password_rehashes(
    client: AsyncClient, test_user: usr_models.User, db_session: AsyncSession
):
    """
    비밀번호를 변경하면 새 해시가 저장되고, 새 비밀번호로만 로그인할 수 있어야 합니다.
    """
    stored = await _stored_credentials(db_session, test_user.email)

    response = await client.patch(f"/user-credentials/{stored.id}", json={"password": "new-password"})
    assert response.status_code == 204

    stored = await _stored_credentials(db_session, test_user.email)
    assert verify_password("new-password", stored.password)

    old = await client.post("/users/login", json={"email": test_user.email, "password": "lovelace123"})
    new = await client.post("/users/login", json={"email": test_user.email, "password": "new-password"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_credentials_to_missing_user(
    client: AsyncClient, test_user: usr_models.User, db_session: AsyncSession
):
    stored = await _stored_credentials(db_session, test_user.email)

    response = await client.patch(f"/user-credentials/{stored.id}", json={"userId": "ghost@example.com"})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_replace_credentials(client: AsyncClient, user_factory, db_session: AsyncSession):
    await user_factory("old@example.com", "old-password")
    await user_factory("new@example.com")
    stored = await _stored_credentials(db_session, "old@example.com")

    response = await client.put(
        f"/user-credentials/{stored.id}", json={"userId": "new@example.com", "password": "fresh-password"}
    )

    assert response.status_code == 204
    moved = await _stored_credentials(db_session, "new@example.com")
    assert moved.id == stored.id
    assert verify_password("fresh-password", moved.password)


@pytest.mark.asyncio
async def test_bulk_update_credentials_password(client: AsyncClient, user_factory, db_session: AsyncSession):
    await user_factory("a@example.com", "password-a")
    await user_factory("b@example.com", "password-b")

    response = await client.patch(
        "/user-credentials",
        params={"where": json.dumps({"userId": {"inq": ["a@example.com", "b@example.com"]}})},
        json={"password": "shared-password"},
    )

    assert response.status_code == 200
    assert response.json() == {"count": 2}
    login = await client.post("/users/login", json={"email": "b@example.com", "password": "shared-password"})
    assert login.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "where",
    [
        {"userId": {}},
        {"userId": ["a@example.com"]},
        {"userId": {"eq": {"x": 1}}},
        {"userId": {"gt": [1]}},
    ],
)
async def test_bulk_update_rejects_unusable_where(client: AsyncClient, user_factory, db_session: AsyncSession, where):
    """
    빈 연산자 객체나 스칼라가 아닌 값이 들어간 where는 400으로 거부되고, 비밀번호는 그대로 남아야 합니다.
    """
    await user_factory("a@example.com", "password-a")
    await user_factory("b@example.com", "password-b")

    response = await client.patch(
        "/user-credentials", params={"where": json.dumps(where)}, json={"password": "newpass99"}
    )

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid filter")
    for email, password in (("a@example.com", "password-a"), ("b@example.com", "password-b")):
        stored = await _stored_credentials(db_session, email)
        assert verify_password(password, stored.password)
        assert not verify_password("newpass99", stored.password)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "where",
    [
        {"userId": ["a@example.com"]},
        {"userId": {"eq": {"x": 1}}},
        {"userId": {"gt": [1]}},
    ],
)
async def test_count_credentials_rejects_non_scalar_values(client: AsyncClient, where):
    response = await client.get("/user-credentials/count", params={"where": json.dumps(where)})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bulk_update_cannot_change_user_id(client: AsyncClient, test_user: usr_models.User):
    response = await client.patch("/user-credentials", json={"userId": "other@example.com"})

    assert response.status_code == 400
    assert response.json()["detail"] == "userId cannot be changed by a bulk update"


@pytest.mark.asyncio
async def test_delete_credentials(client: AsyncClient, test_user: usr_models.User, db_session: AsyncSession):
    stored = await _stored_credentials(db_session, test_user.email)

    response = await client.delete(f"/user-credentials/{stored.id}")
    assert response.status_code == 204

    assert (await client.delete(f"/user-credentials/{stored.id}")).status_code == 404
    login = await client.post("/users/login", json={"email": test_user.email, "password": "lovelace123"})
    assert login.status_code == 401
