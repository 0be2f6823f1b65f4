"""
Upload helper.

Posts a snapshot to the remote collector as a multipart body with a single
`log` file part, and reports what the collector answered.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests

FilePart = Tuple[str, bytes, str]


@dataclass(frozen=True)
class UploadArgs:
    url: str
    files: Dict[str, FilePart]


@dataclass(frozen=True)
class UploadResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    @property
    def file_id(self) -> Optional[str]:
        file_id = self.data.get("fileId")
        return str(file_id) if file_id is not None else None


def json_to_file(data: List[Dict[str, Any]], filename: str) -> FilePart:
    """Render messages as a JSON file part named `<filename>.json`."""
    body = json.dumps(data, ensure_ascii=False).encode("utf-8")
    return f"{filename}.json", body, "application/json"


def start_upload(
    args: UploadArgs,
    *,
    timeout: float = 30.0,
    session: Optional[requests.Session] = None,
) -> UploadResult:
    """
    POST the multipart body and parse the collector's JSON reply.

    Raises
    ------
    requests.RequestException
        On transport errors or a non-2xx status.
    ValueError
        If the reply is not JSON.
    """
    post = session.post if session is not None else requests.post
    resp = post(args.url, files=args.files, timeout=timeout)
    resp.raise_for_status()
    body = resp.json()
    if not isinstance(body, dict):
        raise ValueError("Unexpected upload response body")

    data = body.get("data")
    return UploadResult(
        success=bool(body.get("success")),
        data=data if isinstance(data, dict) else {},
        message=str(body.get("message", "")),
    )
