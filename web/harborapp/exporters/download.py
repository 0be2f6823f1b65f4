"""
Download helper.

Writes a harbor snapshot (list of export envelopes) to the export folder as
JSON, optionally zstd-compressed, or hands it to a caller-supplied callback
instead. `read_export` opens either form back for replay tooling and tests.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Generator, IO, List, Optional

import zstandard  # type: ignore
from werkzeug.utils import secure_filename

Messages = List[Dict[str, Any]]

ZSTD_SUFFIX = ".zst"
MAGIC_ZSTD = bytes.fromhex("28b52ffd")


class ExportError(ValueError):
    """Export arguments cannot be turned into a file."""


@dataclass(frozen=True)
class DownloadArgs:
    data: Messages
    filename: Callable[[], str]
    custom_download: Optional[Callable[[Messages], None]] = None
    export_dir: Path = Path("exports")
    compress: bool = False


def _target_path(args: DownloadArgs) -> Path:
    name = secure_filename(args.filename() or "")
    if not name:
        raise ExportError("Export filename is empty after sanitizing")
    suffix = ".json" + (ZSTD_SUFFIX if args.compress else "")
    return Path(args.export_dir) / f"{name}{suffix}"


def start_download(args: DownloadArgs) -> Optional[Path]:
    """
    Persist the snapshot and return the written path.

    When `custom_download` is set it receives the messages and nothing is
    written (returns None).
    """
    if args.custom_download is not None:
        args.custom_download(args.data)
        return None

    out_path = _target_path(args)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    raw = json.dumps(args.data, ensure_ascii=False).encode("utf-8")

    if args.compress:
        raw = zstandard.ZstdCompressor().compress(raw)

    with out_path.open("wb") as f:
        f.write(raw)
    return out_path


@contextmanager
def open_export_stream(path: Path) -> Generator[IO[bytes], None, None]:
    """Readable binary stream over an export, transparently zstd-decompressed."""
    raw = open(path, "rb")
    head = raw.read(4)
    raw.seek(0)

    if head != MAGIC_ZSTD:
        try:
            yield raw
        finally:
            raw.close()
        return

    stream = zstandard.ZstdDecompressor().stream_reader(raw)
    try:
        yield stream
    finally:
        try:
            stream.close()
        finally:
            raw.close()


def read_export(path: Path) -> Messages:
    """Load the messages from an export written by `start_download`."""
    with open_export_stream(Path(path)) as f:
        return json.loads(f.read().decode("utf-8"))
