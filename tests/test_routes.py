"""
Tests for the Flask collector: intake, control, and export routes.
"""

import requests

from harborapp.plugin import DataHarborPlugin, HostConfig, PluginConfig


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


class TestEvents:
    def test_ingest_single_and_batch(self, client, app):
        client.post("/events", json={"type": "console", "data": {"args": ["one"]}})
        resp = client.post(
            "/events",
            json=[
                {"type": "network", "data": {"url": "https://a.test/x"}},
                {"type": "network", "data": {"url": "https://a.test/x"}},
            ],
        )
        assert resp.get_json() == {"success": True, "received": 2}
        plugin = app.extensions["harbor_plugin"]
        assert [e.kind for e in plugin.harbor.get_all()] == ["console", "network"]

    def test_requires_json(self, client):
        resp = client.post("/events", data="not json", content_type="text/plain")
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False


class TestControl:
    def test_status_reports_counters(self, client):
        client.post("/events", json={"type": "network", "data": {"url": "https://a.test/y"}})
        body = client.get("/harbor/status").get_json()
        assert body["entries"] == 1
        assert body["stock"] == ["https://a.test/y"]
        assert body["paused"] is False
        assert body["initialized"] is True

    def test_pause_resume(self, client):
        client.post("/harbor/pause")
        client.post("/events", json={"type": "console", "data": "ignored"})
        assert client.get("/harbor/status").get_json()["entries"] == 0
        client.post("/harbor/resume")
        client.post("/events", json={"type": "console", "data": "kept"})
        assert client.get("/harbor/status").get_json()["entries"] == 1

    def test_reharbor_drops_data(self, client):
        client.post("/events", json={"type": "console", "data": "old"})
        assert client.post("/harbor/reharbor").get_json() == {"success": True}
        assert client.get("/harbor/status").get_json()["entries"] == 0

    def test_unknown_route_is_json(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.get_json()["success"] is False


class TestExport:
    def test_download_writes_into_export_folder(self, client, app):
        client.post("/events", json={"type": "system", "data": {"os": "linux"}})
        body = client.post("/harbor/download", json={"clear_cache": False}).get_json()
        assert body["success"] is True
        assert (app.extensions["harbor_plugin"].config.export_folder / body["file"]).exists()
        assert client.get("/harbor/status").get_json()["entries"] == 1

    def test_upload_returns_replay_url(self, client, monkeypatch):
        class Resp:
            def raise_for_status(self):
                pass

            def json(self):
                return {"success": True, "data": {"fileId": "f1"}}

        monkeypatch.setattr(requests, "post", lambda url, files, timeout: Resp())
        client.post("/events", json={"type": "console", "data": "x"})
        body = client.post("/harbor/upload").get_json()
        assert body["success"] is True
        assert body["url"].endswith("/api/v1/log/download?fileId=f1")
        assert body["url"].startswith("https://replay.test/#/replay?url=")
        assert client.get("/harbor/status").get_json()["entries"] == 0

    def test_upload_failure_is_502(self, client, monkeypatch):
        def boom(url, files, timeout):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(requests, "post", boom)
        resp = client.post("/harbor/upload")
        assert resp.status_code == 502

    def test_failing_custom_download_is_500(self, client, app):
        def failing_download(messages):
            raise OSError("disk full")

        original = app.extensions["harbor_plugin"]
        original.on_reset()
        plugin = DataHarborPlugin(PluginConfig(on_download=failing_download), logger=app.logger)
        plugin.on_init(app.extensions["event_bus"], HostConfig(offline=True))
        app.extensions["harbor_plugin"] = plugin

        client.post("/events", json={"type": "console", "data": "x"})
        resp = client.post("/harbor/download")
        assert resp.status_code == 500
        assert resp.get_json()["success"] is False
        assert client.get("/harbor/status").get_json()["entries"] == 1

    def test_successful_custom_download_has_no_file(self, client, app):
        received = []
        original = app.extensions["harbor_plugin"]
        original.on_reset()
        plugin = DataHarborPlugin(PluginConfig(on_download=received.append), logger=app.logger)
        plugin.on_init(app.extensions["event_bus"], HostConfig(offline=True))
        app.extensions["harbor_plugin"] = plugin

        client.post("/events", json={"type": "console", "data": "x"})
        body = client.post("/harbor/download").get_json()
        assert body == {"success": True, "file": None}
        assert received[0][0]["data"] == "x"
