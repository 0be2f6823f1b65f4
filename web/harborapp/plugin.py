"""
Data harbor plugin: wires a Harbor to the host's event bus.

This module owns the host-facing lifecycle around the harbor engine:
- filter incoming "public-data" messages by cared categories,
- feed accepted messages into the harbor,
- run the period timer and announce boundaries as "harbor-clear",
- export the snapshot by download or upload, clearing afterwards on request.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Union, overload
from urllib.parse import urlencode

import requests
from pydantic import BaseModel, Field, field_validator

from data_harbor import DATA_TYPES, Harbor, HarborConfig, make_entry

from .exporters import (
    DownloadArgs,
    ExportError,
    UploadArgs,
    UploadResult,
    json_to_file,
    start_download,
    start_upload,
)
from .ports import EventBusPort
from .utils import default_filename, get_device_id, remove_end_slash, user_agent

Action = Literal["download", "upload"]

PUBLIC_DATA = "public-data"
HARBOR_CLEAR = "harbor-clear"

EXPORT_ERRORS = (requests.RequestException, OSError, ValueError)


def _default_cared() -> Dict[str, bool]:
    return {kind: True for kind in DATA_TYPES}


class PluginConfig(HarborConfig):
    """Harbor knobs plus host-side collection and export settings."""

    cared_data: Dict[str, bool] = Field(
        default_factory=_default_cared,
        description="Which message types to collect.",
    )
    filename: Callable[[], str] = Field(
        default=default_filename,
        description="Export filename factory (without extension).",
    )
    on_download: Optional[Callable[[List[Dict[str, Any]]], None]] = Field(
        default=None,
        description="Custom download behavior; receives the snapshot messages.",
    )
    export_folder: Path = Field(default=Path("exports"), description="Download target directory.")
    compress: bool = Field(default=False, description="zstd-compress downloaded exports.")
    upload_timeout: float = Field(default=30.0, gt=0, description="Upload request timeout (seconds).")

    @field_validator("cared_data", mode="before")
    @classmethod
    def _merge_cared(cls, value: Any) -> Dict[str, bool]:
        merged = _default_cared()
        if isinstance(value, dict):
            for kind, flag in value.items():
                if kind in merged:
                    merged[kind] = bool(flag)
        return merged

    def harbor_config(self) -> HarborConfig:
        return HarborConfig(maximum=self.maximum, period=self.period)

    class Config:
        frozen = True


class HostConfig(BaseModel):
    """Host settings the plugin reads at init."""

    api: str = ""
    enable_ssl: bool = False
    offline: bool = False
    project: str = ""
    title: str = ""
    client_origin: str = ""

    class Config:
        frozen = True


class DataHarborPlugin:
    """
    Collects cared public data into a Harbor and exports it on demand.

    One plugin instance owns one harbor. `on_init` is idempotent per
    instance; `on_reset` returns the plugin to its uninitialized state.
    """

    name = "DataHarborPlugin"

    def __init__(
        self,
        config: Union[PluginConfig, Dict[str, Any], None] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if config is None:
            config = PluginConfig()
        elif not isinstance(config, PluginConfig):
            config = PluginConfig(**config)
        self.config: PluginConfig = config
        self.logger = logger or logging.getLogger("harborapp")
        self.harbor = Harbor(config.harbor_config(), logger=self.logger)

        self.api_base = ""
        self.is_paused = False
        self.host_config: Optional[HostConfig] = None
        self.bus: Optional[EventBusPort] = None
        self._initialized = False
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ---------------------------- Lifecycle -----------------------------

    def on_init(self, bus: EventBusPort, host_config: Union[HostConfig, Dict[str, Any], None] = None) -> bool:
        """
        Subscribe to the bus and start the period timer.

        Returns False (and does nothing) if this instance is already initialized.
        """
        with self._lock:
            if self._initialized:
                return False
            self._initialized = True

        if host_config is None:
            host_config = HostConfig()
        elif not isinstance(host_config, HostConfig):
            host_config = HostConfig(**host_config)
        self.host_config = host_config
        self.bus = bus

        if not host_config.offline and not host_config.api:
            self.logger.warning("Cannot upload logs: missing 'api' configuration (%s)", host_config)
        elif host_config.api:
            scheme = "https://" if host_config.enable_ssl else "http://"
            self.api_base = remove_end_slash(f"{scheme}{host_config.api}")

        bus.add_listener(PUBLIC_DATA, self._on_public_data)
        self.harbor.add_boundary_listener(self._announce_clear)
        self.harbor.start_period_timer()
        return True

    def on_reset(self) -> None:
        """Stop the timer, drop all data, and detach from the bus."""
        self.harbor.stop_period_timer()
        self.harbor.clear()
        self.harbor.remove_boundary_listener(self._announce_clear)
        if self.bus is not None:
            self.bus.remove_listener(PUBLIC_DATA, self._on_public_data)
        with self._lock:
            self._initialized = False

    def pause(self) -> None:
        self.is_paused = True

    def resume(self) -> None:
        self.is_paused = False

    def reharbor(self) -> None:
        """Drop harbored data and re-record from a fresh baseline."""
        self.harbor.start_period_timer()
        self.harbor.clear()
        self._announce_clear()
        self.is_paused = False

    # ----------------------------- Intake -------------------------------

    def is_cared_public_data(self, message: Any) -> bool:
        if not isinstance(message, dict):
            return False
        kind = message.get("type")
        cared = self.config.cared_data
        if kind in ("console", "storage", "system", "rrweb-event"):
            return cared[kind]
        if kind == "network":
            data = message.get("data")
            url = data.get("url") if isinstance(data, dict) else None
            return cared["network"] and url not in self.harbor.stock
        return False

    def _on_public_data(self, message: Any) -> None:
        if self.is_paused or not self.is_cared_public_data(message):
            return
        entry = make_entry(message["type"], message.get("data"))
        if not self.harbor.add(entry):
            self.logger.warning("[%s] Fail to save data in harbor: %s", self.name, entry.kind)

    def _announce_clear(self) -> None:
        if self.bus is not None:
            self.bus.dispatch_event(HARBOR_CLEAR, None)

    # ----------------------------- Export -------------------------------

    def tags(self) -> Dict[str, str]:
        host = self.host_config or HostConfig()
        return {
            "project": host.project,
            "title": host.title,
            "deviceId": get_device_id(),
            "userAgent": user_agent(),
        }

    @overload
    def get_params(self, action: Literal["download"]) -> DownloadArgs: ...

    @overload
    def get_params(self, action: Literal["upload"]) -> UploadArgs: ...

    def get_params(self, action: Action) -> Union[DownloadArgs, UploadArgs]:
        data = self.harbor.get_messages()
        if action == "download":
            return DownloadArgs(
                data=data,
                filename=self.config.filename,
                custom_download=self.config.on_download,
                export_dir=self.config.export_folder,
                compress=self.config.compress,
            )
        if action == "upload":
            if not self.api_base:
                raise ExportError("No api base configured for upload")
            url = f"{self.api_base}/api/v1/log/upload?{urlencode(self.tags())}"
            return UploadArgs(url=url, files={"log": json_to_file(data, self.config.filename())})
        raise ExportError(f"Unknown action: {action!r}")

    def export(self, action: Action, clear_cache: bool = True) -> Optional[Union[Path, str]]:
        """
        Export the harbor, raising on failure.

        Returns the written path for a download (None for a custom download)
        and the replay URL for an upload. The harbor is only cleared after a
        successful export; entries that arrive between the snapshot and the
        clear are dropped with it.
        """
        result: Optional[Union[Path, str]] = None
        if action == "download":
            result = start_download(self.get_params("download"))
        elif action == "upload":
            uploaded = start_upload(self.get_params("upload"), timeout=self.config.upload_timeout)
            result = self.get_debug_url(uploaded)
        else:
            raise ExportError(f"Unknown action: {action!r}")

        if clear_cache:
            self.harbor.clear()
            self._announce_clear()
        return result

    def on_offline_log(self, action: Action, clear_cache: bool = True) -> Optional[Union[Path, str]]:
        """Like `export`, but failures are logged and yield None."""
        try:
            return self.export(action, clear_cache=clear_cache)
        except EXPORT_ERRORS as e:
            self.logger.error("[%s] %s failed: %s", self.name, action, e)
            return None

    def get_debug_url(self, result: Optional[UploadResult]) -> str:
        if not result or not result.success or result.file_id is None:
            return ""
        origin = remove_end_slash((self.host_config or HostConfig()).client_origin)
        log_url = f"{self.api_base}/api/v1/log/download?fileId={result.file_id}"
        return f"{origin}/#/replay?url={log_url}"
