from cashtrackr.config import Settings
from cashtrackr.main import app, create_app


class _Manager:
    def __init__(self, healthy: bool):
        self.healthy = healthy

    async def health_check(self) -> bool:
        return self.healthy


async def test_liveness(client):
    res = await client.get("/api/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(app.state, "db", None, raising=False)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


async def test_readiness_with_healthy_database(client, monkeypatch):
    monkeypatch.setattr(app.state, "db", _Manager(healthy=True), raising=False)
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_with_unreachable_database(client, monkeypatch):
    monkeypatch.setattr(app.state, "db", _Manager(healthy=False), raising=False)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503


def test_create_app_binds_given_settings():
    settings = Settings(frontend_url="https://app.test", jwt_secret="other-secret")
    built = create_app(settings)
    assert built.state.settings is settings
    assert built is not app
