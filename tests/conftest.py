import pytest
from httpx import AsyncClient, ASGITransport
from fastapi.testclient import TestClient

from backend.config import Settings
from backend.database import Base, init_db, make_engine, make_session_factory
from backend.main import create_app

# Тестовая БД в памяти, свежая для каждого теста
TEST_DATABASE_URL = "sqlite://"


class FakeDescriptionGenerator:
    """Заменяет OpenAI: возвращает предсказуемый текст или падает по требованию."""

    def __init__(self):
        self.calls = []
        self.error = None

    def generate(self, title):
        self.calls.append(title)
        if self.error is not None:
            raise self.error
        return f"Description for {title}"


@pytest.fixture()
def settings():
    # bcrypt с минимальной стоимостью, чтобы тесты шли быстро
    return Settings(database_url=TEST_DATABASE_URL, secret_key="test-secret", bcrypt_rounds=4)


@pytest.fixture()
def engine(settings):
    engine = make_engine(settings.database_url)
    init_db(engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    db = make_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def fake_generator():
    return FakeDescriptionGenerator()


@pytest.fixture()
def app(settings, engine, fake_generator):
    return create_app(settings, session_factory=make_session_factory(engine), description_generator=fake_generator)


@pytest.fixture()
def client(app):
    return TestClient(app)


# 💡 HTTP-клиент с ASGITransport
@pytest.fixture()
async def aclient(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture()
def register(aclient):
    async def _register(username="alice", password="secret1"):
        resp = await aclient.post("/auth/register", json={"username": username, "password": password})
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _register


@pytest.fixture()
def auth_headers(register):
    async def _auth_headers(username="alice", password="secret1"):
        data = await register(username, password)
        return {"Authorization": f"Bearer {data['token']}"}

    return _auth_headers
