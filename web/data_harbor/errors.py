"""Exception types raised inside the harbor engine."""

from __future__ import annotations


class HarborError(Exception):
    """Base class for harbor failures."""


class MalformedEntryError(HarborError, ValueError):
    """The codec cannot represent an entry's payload."""
