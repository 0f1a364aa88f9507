import pytest

from app import create_app


def test_home_lists_plugins():
    app = create_app("TestingConfig")
    client = app.test_client()
    response = client.get("/")
    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["data"]["site"] == "Scientific Calculator"
    titles = [item["title"] for item in payload["data"]["plugins"]]
    assert "Scientific Calculator" in titles
    assert response.headers.get("Content-Security-Policy")
    assert response.headers.get("X-Content-Type-Options") == "nosniff"


def test_unknown_route_returns_json_error():
    client = create_app("TestingConfig").test_client()
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    payload = response.get_json()
    assert payload["success"] is False
    assert payload["error"]["code"] == "http.404"


def test_plugin_settings_are_loaded():
    app = create_app("TestingConfig")
    assert app.config["TESTING"] is True
    assert app.config["PLUGIN_SETTINGS"]["scientific_calculator"]["history_limit"] == 10
    assert app.config["MAX_CONTENT_LENGTH"] == 64 * 1024


def test_unknown_config_name():
    with pytest.raises(ValueError):
        create_app("ProductionConfig")
