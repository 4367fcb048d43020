from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LayoutConfigurationError(Exception):
    """Raised when the host hands over a size constraint the chart cannot interpret."""


class MeasureMode(Enum):
    EXACT = "exact"
    AT_MOST = "at_most"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class MeasureSpec:
    """Size constraint for one axis, as offered by the host layout."""

    mode: MeasureMode
    size: float = 0.0

    @classmethod
    def exact(cls, size: float) -> "MeasureSpec":
        return cls(MeasureMode.EXACT, size)

    @classmethod
    def at_most(cls, size: float) -> "MeasureSpec":
        return cls(MeasureMode.AT_MOST, size)

    @classmethod
    def unspecified(cls) -> "MeasureSpec":
        return cls(MeasureMode.UNSPECIFIED)


def resolve_width(spec: MeasureSpec, content_width: float) -> float:
    if spec.mode is MeasureMode.UNSPECIFIED:
        return content_width
    if spec.mode in (MeasureMode.EXACT, MeasureMode.AT_MOST):
        return spec.size
    raise LayoutConfigurationError(f"Unknown width measure mode: {spec.mode!r}")


def resolve_height(spec: MeasureSpec, content_height: float) -> float:
    if spec.mode is MeasureMode.UNSPECIFIED:
        return content_height
    if spec.mode is MeasureMode.EXACT:
        return spec.size
    if spec.mode is MeasureMode.AT_MOST:
        return min(content_height, spec.size)
    raise LayoutConfigurationError(f"Unknown height measure mode: {spec.mode!r}")
