"""Snapshot exporters: local download and remote upload."""

from __future__ import annotations

from .download import DownloadArgs, ExportError, open_export_stream, read_export, start_download
from .upload import UploadArgs, UploadResult, json_to_file, start_upload

__all__ = [
    "DownloadArgs",
    "ExportError",
    "open_export_stream",
    "read_export",
    "start_download",
    "UploadArgs",
    "UploadResult",
    "json_to_file",
    "start_upload",
]
