"""
mp_dispatch – In-process command/query mediator with a behavior pipeline.

Import path convention::

    from mp_dispatch.application.cqrs import Command, CommandHandler, Mediator
    from mp_dispatch.application.pipeline import PipelineBehavior, TimingBehavior
    from mp_dispatch.kernel.errors import HandlerNotFoundError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
