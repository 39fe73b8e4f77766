"""The plotted series and the renderer that appends to it."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator

from app.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Point:
    """One plotted observation: the fetch number and its price."""

    index: int
    value: float

    def to_dict(self) -> dict[str, float | int]:
        return {"index": self.index, "value": self.value}


class Series:
    """Append-only sequence of :class:`Point`, ordered by index.

    Indices must strictly increase; the series never reorders or drops
    points and grows for the life of the process.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._points: list[Point] = []

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    @property
    def last(self) -> Point | None:
        return self._points[-1] if self._points else None

    def append(self, point: Point) -> None:
        last = self.last
        if last is not None and point.index <= last.index:
            raise ValueError(
                f"Point index {point.index} does not follow {last.index}"
            )
        self._points.append(point)

    def points(self) -> list[Point]:
        """Return a copy of the points in plotting order."""
        return list(self._points)


Listener = Callable[[Point], None]


class Renderer:
    """Apply new prices to a :class:`Series`.

    Must only be called on the UI thread (see :mod:`chart.executor`).  NaN
    values are logged and dropped, so the series never holds a NaN point.
    """

    def __init__(self, series: Series) -> None:
        self.series = series
        self._listeners: list[Listener] = []

    def add_listener(self, listener: Listener) -> None:
        """Call *listener* with every point that is appended."""
        self._listeners.append(listener)

    def render(self, index: int, value: float) -> Point | None:
        if math.isnan(value):
            logger.info("Skipping NaN price for point #%d", index)
            return None

        point = Point(index=index, value=float(value))
        self.series.append(point)
        logger.debug("Plotted point #%d = %.4f", index, value)

        for listener in self._listeners:
            listener(point)
        return point

    def snapshot(self) -> list[Point]:
        return self.series.points()
