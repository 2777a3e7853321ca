from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app import main as app_main


@pytest.mark.parametrize(("enabled", "expected_status"), [(True, 200), (False, 404)])
def test_openapi_docs_follow_setting(monkeypatch, enabled: bool, expected_status: int) -> None:
    monkeypatch.setattr(
        app_main,
        "get_settings",
        lambda: SimpleNamespace(log_level="INFO", app_env="test", enable_openapi_docs=enabled),
    )
    client = TestClient(app_main.create_app())

    for path in ("/docs", "/redoc", "/openapi.json"):
        assert client.get(path).status_code == expected_status


def test_openapi_lists_console_routes() -> None:
    schema = TestClient(app_main.app).get("/openapi.json").json()

    assert "/internal/answers" in schema["paths"]
    assert "/internal/store/purchases" in schema["paths"]
    assert "/internal/campaigns/{campaign_id}/players/{player_id}/visible-questions" in schema["paths"]
