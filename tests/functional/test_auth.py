import pytest


async def test_register_and_login(aclient):
    # регистрация
    resp = await aclient.post("/auth/register", json={"username": "bob", "password": "123456"})
    assert resp.status_code == 201
    data = resp.json()
    assert data["user"]["username"] == "bob"
    assert set(data["user"]) == {"id", "username"}
    assert data["token"]

    # вход и получение JWT
    token_resp = await aclient.post("/auth/login", json={"username": "bob", "password": "123456"})
    assert token_resp.status_code == 200
    login_data = token_resp.json()
    assert login_data["user"] == data["user"]
    assert login_data["token"]


async def test_register_twice(aclient, register):
    await register("alice", "secret1")
    resp = await aclient.post("/auth/register", json={"username": "alice", "password": "other"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username already exists"


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "", "password": "123456"},
        {"username": "bob", "password": ""},
        {"username": "bob"},
        {},
    ],
)
async def test_register_validation_errors(aclient, payload):
    resp = await aclient.post("/auth/register", json=payload)
    assert resp.status_code == 400
    assert resp.json()["message"] == "Username and password are required"


async def test_register_rejects_non_string_fields(aclient):
    resp = await aclient.post("/auth/register", json={"username": 123, "password": ["x"]})
    assert resp.status_code == 400


async def test_password_never_returned(aclient):
    resp = await aclient.post("/auth/register", json={"username": "carol", "password": "topsecret"})
    assert "topsecret" not in resp.text
    assert "password" not in resp.text


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "alice", "password": "wrong"},
        {"username": "nosuchuser", "password": "secret1"},
        {"username": "alice"},
        {"username": 123, "password": "secret1"},
        {"username": "alice", "password": 123456},
        {"username": ["alice"], "password": {"x": 1}},
        {"username": None, "password": None},
    ],
)
async def test_login_failures_are_indistinguishable(aclient, register, payload):
    await register("alice", "secret1")
    resp = await aclient.post("/auth/login", json=payload)
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid credentials"}


async def test_login_token_works_for_tasks(aclient, register):
    await register("dave", "secret1")
    token = (await aclient.post("/auth/login", json={"username": "dave", "password": "secret1"})).json()["token"]
    resp = await aclient.get("/tasks", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
