"""Color and position scales for the map and its legend."""

from __future__ import annotations

import bisect
import logging
import math
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)


def _scheme(specifier: str) -> list[str]:
    return ["#" + specifier[i:i + 6] for i in range(0, len(specifier), 6)]


# Sequential single-hue Greens (ColorBrewer), keyed by number of classes
GREENS: dict[int, list[str]] = {
    3: _scheme("e5f5e0a1d99b31a354"),
    4: _scheme("edf8e9bae4b374c476238b45"),
    5: _scheme("edf8e9bae4b374c47631a354006d2c"),
    6: _scheme("edf8e9c7e9c0a1d99b74c47631a354006d2c"),
    7: _scheme("edf8e9c7e9c0a1d99b74c47641ab5d238b45005a32"),
    8: _scheme("f7fcf5e5f5e0c7e9c0a1d99b74c47641ab5d238b45005a32"),
    9: _scheme("f7fcf5e5f5e0c7e9c0a1d99b74c47641ab5d238b45006d2c00441b"),
}


def _is_missing(x: float | None) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


class QuantizeScale:
    """Maps a continuous domain onto a discrete range in equal-width bins.

    Values outside the domain clamp into the first or last bin. ``None`` and
    NaN map to ``None``.
    """

    def __init__(self, domain: tuple[float, float], range_: Sequence[str]):
        if not range_:
            raise ValueError("QuantizeScale needs at least one output value")
        self.x0, self.x1 = float(domain[0]), float(domain[1])
        self._range = list(range_)
        n = len(self._range) - 1
        self._thresholds = [
            ((i + 1) * self.x1 - (i - n) * self.x0) / (n + 1) for i in range(n)
        ]

    def __call__(self, x: float | None) -> str | None:
        if _is_missing(x):
            return None
        return self._range[bisect.bisect_right(self._thresholds, x)]

    def domain(self) -> tuple[float, float]:
        return self.x0, self.x1

    def range(self) -> list[str]:
        return list(self._range)

    def thresholds(self) -> list[float]:
        return list(self._thresholds)

    def invert_extent(self, y: str) -> tuple[float, float]:
        """Return the ``[lo, hi]`` interval of inputs mapped to *y*."""
        try:
            i = self._range.index(y)
        except ValueError:
            return math.nan, math.nan
        n = len(self._thresholds)
        if n == 0:
            return self.x0, self.x1
        if i < 1:
            return self.x0, self._thresholds[0]
        if i >= n:
            return self._thresholds[n - 1], self.x1
        return self._thresholds[i - 1], self._thresholds[i]


class LinearScale:
    """Maps ``[d0, d1]`` linearly onto ``[r0, r1]``, without clamping."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.d0, self.d1 = float(domain[0]), float(domain[1])
        self.r0, self.r1 = float(range_[0]), float(range_[1])

    def __call__(self, x: float) -> float:
        span = self.d1 - self.d0
        # A collapsed domain maps everything to the middle of the range
        t = (x - self.d0) / span if span else 0.5
        return self.r0 + t * (self.r1 - self.r0)

    def domain(self) -> tuple[float, float]:
        return self.d0, self.d1

    def range(self) -> tuple[float, float]:
        return self.r0, self.r1


def arange(start: float, stop: float, step: float) -> list[float]:
    """Evenly spaced values in ``[start, stop)``; empty when step is 0."""
    if not step or math.isnan(step):
        return []
    n = max(0, math.ceil((stop - start) / step))
    return [start + i * step for i in range(n)]


def palette(grades_count: int) -> list[str]:
    try:
        return list(GREENS[grades_count])
    except KeyError:
        raise ValueError(f"No Greens palette with {grades_count} classes") from None


def build_color_scale(percentages: Iterable[float | None], grades_count: int = 8) -> QuantizeScale:
    """Quantize scale over the observed ``[min, max]`` of *percentages*.

    Missing values are ignored. With no values at all the domain is NaN and
    every input maps to the last color.
    """
    values = [p for p in percentages if not _is_missing(p)]
    if values:
        lo, hi = min(values), max(values)
    else:
        logger.warning("No percentages available, color scale domain is undefined")
        lo = hi = math.nan
    logger.info("Color scale domain: [%s, %s] over %d grades", lo, hi, grades_count)
    return QuantizeScale((lo, hi), palette(grades_count))
