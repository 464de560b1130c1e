"""
Acceleration events and per-object event sequences.

An event is a constant-acceleration interval of fixed duration. An object's
motion plan is the ordered EventSequence of its events; order defines
playback order. Entries with a non-positive duration can never be scheduled
and are dropped when the sequence is built.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple

import numpy as np


def coerce_float(value: Any) -> float:
    """
    Convert an authored value to float, normalising bad input to 0.

    Strings are parsed, booleans and None count as missing. Anything that
    cannot be parsed, or parses to NaN/inf, becomes 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


@dataclass(frozen=True)
class Event:
    """Constant acceleration [m/s²] held for duration [s]."""

    acceleration: float
    duration: float

    def __repr__(self):
        return f"Event(acc={self.acceleration:g} m/s², dur={self.duration:g} s)"


def _unpack(raw: Any) -> Tuple[float, float]:
    """Read (acceleration, duration) out of a mapping, Event or pair."""
    if isinstance(raw, Event):
        return raw.acceleration, raw.duration
    if isinstance(raw, dict):
        acc = raw.get('acceleration', raw.get('acc'))
        dur = raw.get('duration', raw.get('dur'))
        return coerce_float(acc), coerce_float(dur)
    try:
        acc, dur = raw
    except (TypeError, ValueError):
        return 0.0, 0.0
    return coerce_float(acc), coerce_float(dur)


class EventSequence:
    """
    Immutable ordered sequence of acceleration events.

    Build instances with EventSequence.build(), which filters out entries
    whose duration is not strictly positive. The constructor itself assumes
    its events are already valid.
    """

    __slots__ = ('_events',)

    def __init__(self, events: Iterable[Event] = ()):
        self._events = tuple(events)

    @classmethod
    def build(cls, raw_events: Iterable[Any] = ()) -> 'EventSequence':
        """
        Build a sequence from authored events.

        Args:
            raw_events: Mappings with 'acceleration'/'duration' (or 'acc'/'dur')
                keys, Event instances or (acceleration, duration) pairs.

        Returns:
            EventSequence holding, in order, every entry with duration > 0.
        """
        if raw_events is None:
            return cls()
        events = []
        for raw in raw_events:
            acc, dur = _unpack(raw)
            if dur > 0:
                events.append(Event(acceleration=acc, duration=dur))
        return cls(events)

    @property
    def total_duration(self) -> float:
        """Nominal duration of the whole plan [s]."""
        return sum(event.duration for event in self._events)

    @property
    def accelerations(self) -> np.ndarray:
        """Event accelerations as a float64 array (shape: (N,))."""
        return np.array([e.acceleration for e in self._events], dtype=np.float64)

    @property
    def durations(self) -> np.ndarray:
        """Event durations as a float64 array (shape: (N,))."""
        return np.array([e.duration for e in self._events], dtype=np.float64)

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __eq__(self, other):
        if not isinstance(other, EventSequence):
            return NotImplemented
        return self._events == other._events

    def __hash__(self):
        return hash(self._events)

    def __repr__(self):
        return f"EventSequence({list(self._events)!r})"
