"""Testing support – fakes for clocks and instrumented behaviors.

Import in tests::

    from mp_dispatch.testing import FakeClock, RecordingBehavior
"""

from mp_dispatch.testing.fakes import (
    CountingBehavior,
    FakeClock,
    FrozenClock,
    RecordingBehavior,
    ShortCircuitBehavior,
)

__all__ = [
    "CountingBehavior",
    "FakeClock",
    "FrozenClock",
    "RecordingBehavior",
    "ShortCircuitBehavior",
]
