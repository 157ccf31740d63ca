"""Service health and error rendering."""
import weinds.main


def test_health(client, monkeypatch):
    monkeypatch.setattr(weinds.main, "test_mongo_connection", lambda: True)
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["mongodb"] == "connected"
    assert data["llm"] == "not configured"


def test_health_mongo_down(client, monkeypatch):
    monkeypatch.setattr(weinds.main, "test_mongo_connection", lambda: False)
    assert client.get("/health").json()["mongodb"] == "disconnected"
