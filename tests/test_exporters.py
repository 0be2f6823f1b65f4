"""
Tests for the download and upload helpers.
"""

import json

import pytest
import requests

from harborapp.exporters import (
    DownloadArgs,
    ExportError,
    UploadArgs,
    json_to_file,
    read_export,
    start_download,
    start_upload,
)

MESSAGES = [
    {"type": "console", "timestamp": 1, "data": {"args": ["héllo"]}},
    {"type": "divider", "timestamp": 2, "data": None},
]


class TestDownload:
    def test_plain_json(self, tmp_path):
        path = start_download(DownloadArgs(data=MESSAGES, filename=lambda: "log", export_dir=tmp_path))
        assert path == tmp_path / "log.json"
        assert json.loads(path.read_text(encoding="utf-8")) == MESSAGES
        assert read_export(path) == MESSAGES

    def test_zstd_roundtrip_through_reader(self, tmp_path):
        path = start_download(
            DownloadArgs(data=MESSAGES, filename=lambda: "log", export_dir=tmp_path, compress=True)
        )
        assert path.suffixes == [".json", ".zst"]
        assert path.read_bytes()[:4] == bytes.fromhex("28b52ffd")
        assert read_export(path) == MESSAGES

    def test_filename_is_sanitized(self, tmp_path):
        path = start_download(
            DownloadArgs(data=[], filename=lambda: "../../etc/2024/01/02 10:00", export_dir=tmp_path)
        )
        assert path.parent == tmp_path

    def test_empty_filename_rejected(self, tmp_path):
        with pytest.raises(ExportError):
            start_download(DownloadArgs(data=[], filename=lambda: "///", export_dir=tmp_path))

    def test_creates_export_dir(self, tmp_path):
        target = tmp_path / "nested" / "exports"
        start_download(DownloadArgs(data=[], filename=lambda: "x", export_dir=target))
        assert target.is_dir()


class FakeResponse:
    def __init__(self, body, status=200):
        self._body = body
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))

    def json(self):
        return self._body


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, files, timeout):
        self.calls.append((url, files, timeout))
        return self.response


class TestUpload:
    def test_json_to_file(self):
        name, body, mime = json_to_file(MESSAGES, "capture")
        assert name == "capture.json"
        assert mime == "application/json"
        assert json.loads(body) == MESSAGES

    def test_success_result(self):
        session = FakeSession(FakeResponse({"success": True, "data": {"fileId": 7}, "message": "ok"}))
        args = UploadArgs(url="http://c.test/api/v1/log/upload", files={"log": json_to_file([], "a")})
        result = start_upload(args, timeout=5, session=session)
        assert result.success is True
        assert result.file_id == "7"
        assert result.message == "ok"
        assert session.calls[0][2] == 5

    def test_http_error_propagates(self):
        session = FakeSession(FakeResponse({}, status=500))
        with pytest.raises(requests.HTTPError):
            start_upload(UploadArgs(url="http://c.test", files={}), session=session)

    def test_non_object_body_rejected(self):
        session = FakeSession(FakeResponse(["not", "a", "dict"]))
        with pytest.raises(ValueError):
            start_upload(UploadArgs(url="http://c.test", files={}), session=session)
