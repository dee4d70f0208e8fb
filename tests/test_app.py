"""Tests for application startup."""

import main
from ytzip.app import application


def test_start_api_serves_the_given_app(monkeypatch):
    served = {}

    def fake_run(app, host, port):
        served.update(app=app, host=host, port=port)

    def no_second_app():
        raise AssertionError("create_app called again")

    monkeypatch.setattr(application.uvicorn, "run", fake_run)
    monkeypatch.setattr(application, "create_app", no_second_app)
    monkeypatch.setenv("PORT", "8123")

    application.start_api(main.app)

    assert served["app"] is main.app
    assert served["port"] == 8123


def test_start_api_builds_app_when_none_given(monkeypatch):
    served = {}
    sentinel = object()
    monkeypatch.setattr(application.uvicorn, "run", lambda app, host, port: served.update(app=app))
    monkeypatch.setattr(application, "create_app", lambda: sentinel)

    application.start_api()

    assert served["app"] is sentinel
