"""Request entity, execution, dispatch and update scheduling."""

from .dispatcher import CallbackSet, ResponseDispatcher, ResultKind
from .executor import Executor
from .request import AnyRequest, Request
from .updates import Interval, MergedStream, Signal, UpdateScheduler, every, merge

__all__ = [
    "AnyRequest",
    "CallbackSet",
    "Executor",
    "Interval",
    "MergedStream",
    "Request",
    "ResponseDispatcher",
    "ResultKind",
    "Signal",
    "UpdateScheduler",
    "every",
    "merge",
]
