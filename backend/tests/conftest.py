import pytest
from fastapi.testclient import TestClient

from themebot.core.config import Settings
from themebot.core.database import build_engine, build_session_factory, create_tables
from themebot.main import create_app
from themebot.services.gateway import ThemeGateway

from tests.helpers import API_SECRET, FakeChat, make_theme


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'themes.db'}",
        api_secret=API_SECRET,
        upload_dir=tmp_path / "uploads",
        create_tables=True,
        cors_origins=["*"],
        discord_bot_token="",
        discord_channel_id="",
    )


@pytest.fixture()
def fake_chat():
    return FakeChat()


@pytest.fixture()
async def engine(settings):
    engine = build_engine(settings.database_url)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def gateway(engine, fake_chat):
    gateway = ThemeGateway(build_session_factory(engine), chat=fake_chat)
    yield gateway
    await gateway.aclose()


@pytest.fixture()
def app(settings, fake_chat):
    return create_app(settings, chat=fake_chat)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    return {"Authorization": f"Bearer {API_SECRET}"}


@pytest.fixture()
def seed_theme(app, client):
    """Insert a theme through the app's own gateway, on the client's event loop."""

    def _seed(file_id: str = "abc123", **overrides):
        theme = make_theme(file_id, **overrides)
        client.portal.call(app.state.gateway.create, theme)
        return theme

    return _seed
