"""Application pipeline – request behavior chain."""
from mp_dispatch.application.pipeline.behavior import Next, PipelineBehavior
from mp_dispatch.application.pipeline.pipeline import Continuation, Pipeline
from mp_dispatch.application.pipeline.behaviors import (
    CachingBehavior,
    ExceptionLoggingBehavior,
    TimeoutBehavior,
    TimingBehavior,
    ValidationBehavior,
)
from mp_dispatch.application.pipeline.defaults import default_behaviors, default_pipeline

__all__ = [
    "CachingBehavior",
    "Continuation",
    "ExceptionLoggingBehavior",
    "Next",
    "Pipeline",
    "PipelineBehavior",
    "TimeoutBehavior",
    "TimingBehavior",
    "ValidationBehavior",
    "default_behaviors",
    "default_pipeline",
]
