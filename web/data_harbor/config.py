"""
Configuration schema for one harbor.

Only two knobs: the per-segment byte budget and the optional period length.
Construction never fails on bad input: a garbage `maximum` degrades to the
default budget and a garbage `period` degrades to "no division".
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from .divider import is_valid_period

DEFAULT_MAXIMUM: int = 10 * 1024 * 1024  # 10 MiB


class HarborConfig(BaseModel):
    """Validated harbor settings."""

    maximum: int = Field(
        default=DEFAULT_MAXIMUM,
        description="Maximum encoded bytes held by one segment.",
    )
    period: Optional[float] = Field(
        default=None,
        description="Period length in milliseconds; None disables division.",
    )

    @field_validator("maximum", mode="before")
    @classmethod
    def _degrade_maximum(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return DEFAULT_MAXIMUM
        return value

    @field_validator("period", mode="before")
    @classmethod
    def _degrade_period(cls, value: Any) -> Optional[float]:
        return float(value) if is_valid_period(value) else None

    @property
    def divides(self) -> bool:
        return self.period is not None

    class Config:
        frozen = True
