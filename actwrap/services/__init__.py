"""Services layer for actwrap - pure Python APIs returning dataclasses."""

from actwrap.services.wrapper import (
    Collaborators,
    RunState,
    WrapperRunResult,
    run_wrapper,
    select_mode,
)

__all__ = [
    "Collaborators",
    "RunState",
    "WrapperRunResult",
    "run_wrapper",
    "select_mode",
]
