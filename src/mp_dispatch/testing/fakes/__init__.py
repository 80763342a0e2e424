"""Testing fakes – in-memory doubles for kernel ports and pipeline behaviors."""
from mp_dispatch.testing.fakes.behaviors import CountingBehavior, RecordingBehavior, ShortCircuitBehavior
from mp_dispatch.testing.fakes.clock import FakeClock
from mp_dispatch.kernel.time import FrozenClock

__all__ = [
    "CountingBehavior",
    "FakeClock",
    "FrozenClock",
    "RecordingBehavior",
    "ShortCircuitBehavior",
]
