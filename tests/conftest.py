"""
Shared pytest fixtures for the data harbor test suite.

Usage in tests:
    def test_something(harbor_factory, sized_entry):
        harbor = harbor_factory(maximum=100)
        assert harbor.add(sized_entry("network", 40, url="/a"))

    def test_with_host(plugin, bus):
        bus.dispatch_event("public-data", {"type": "console", "data": {...}})
"""

import logging

import pytest

from data_harbor import Harbor, HarborConfig, encode_entry, make_entry
from harborapp import create_app
from harborapp.bus import EventBus
from harborapp.config import Config
from harborapp.plugin import DataHarborPlugin, HostConfig, PluginConfig


class FakeClock:
    """Monotonic clock advanced by hand (seconds)."""

    def __init__(self, start_ms: int = 1_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms / 1000.0

    def advance_ms(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def harbor_factory(clock):
    """Build a Harbor on the fake clock; stops any timer it started."""
    created = []

    def _make(**config):
        harbor = Harbor(HarborConfig(**config), clock=clock)
        created.append(harbor)
        return harbor

    yield _make
    for harbor in created:
        harbor.stop_period_timer()


@pytest.fixture
def sized_entry():
    """
    Build an entry whose encoded size is exactly `size` bytes.

    Padding goes into a "pad" field of a dict payload; network entries carry
    the given url as their dedup key.
    """

    def _make(kind, size, url=None, timestamp=0):
        payload = {"pad": ""}
        if url is not None:
            payload["url"] = url
        base = encode_entry(make_entry(kind, payload, timestamp)).size
        assert size >= base, f"minimum encodable size is {base}"
        payload["pad"] = "x" * (size - base)
        entry = make_entry(kind, payload, timestamp)
        assert encode_entry(entry).size == size
        return entry

    return _make


class RecordingBus(EventBus):
    """EventBus that also remembers every dispatched event."""

    def __init__(self) -> None:
        super().__init__(logger=logging.getLogger("tests.bus"))
        self.dispatched = []

    def dispatch_event(self, event, data):
        self.dispatched.append((event, data))
        super().dispatch_event(event, data)

    def count(self, event):
        return sum(1 for name, _ in self.dispatched if name == event)


@pytest.fixture
def bus():
    return RecordingBus()


@pytest.fixture
def plugin_factory(bus, tmp_path):
    """Build and initialize a DataHarborPlugin exporting into tmp_path."""
    created = []

    def _make(host=None, **config):
        config.setdefault("export_folder", tmp_path / "exports")
        plugin = DataHarborPlugin(PluginConfig(**config), logger=logging.getLogger("tests.plugin"))
        plugin.on_init(bus, host if host is not None else HostConfig(api="collector.test", project="demo", title="t"))
        created.append(plugin)
        return plugin

    yield _make
    for plugin in created:
        plugin.on_reset()


@pytest.fixture
def plugin(plugin_factory):
    return plugin_factory()


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        EXPORT_FOLDER = str(tmp_path / "exports")
        LOG_FILE = str(tmp_path / "logs" / "app.log")
        LOG_LEVEL = "DEBUG"
        HARBOR_MAXIMUM = 1024 * 1024
        HARBOR_PERIOD_MS = None
        HARBOR_API = "collector.test"
        HARBOR_OFFLINE = False
        HARBOR_CLIENT_ORIGIN = "https://replay.test/"

    app = create_app(TestConfig)
    yield app
    app.extensions["harbor_plugin"].on_reset()


@pytest.fixture
def client(app):
    return app.test_client()
