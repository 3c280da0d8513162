from messagecards.reveal.orchestrator import RevealErrorKind, RevealOrchestrator, RevealState, RevealView
from messagecards.reveal.scheduler import AsyncioScheduler, ManualScheduler

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "RevealErrorKind",
    "RevealOrchestrator",
    "RevealState",
    "RevealView",
]
