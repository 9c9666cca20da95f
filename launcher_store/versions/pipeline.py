"""
Sequential pipeline of dependent async stages.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """One step of a pipeline: receives the previous step's output, returns its own."""

    name: str
    run: Callable[[Any], Awaitable[Any]]


class StagePipeline:
    """
    Runs stages strictly one after another.

    The driver only advances when a stage returns; the first exception stops the
    run and propagates to the caller, so later stages never start.
    """

    def __init__(self, name: str, stages: Sequence[Stage]):
        self.name = name
        self.stages = list(stages)

    async def run(self, initial: Any = None) -> Any:
        value = initial
        for index, stage in enumerate(self.stages, 1):
            log.debug(f"[{self.name}] stage {index}/{len(self.stages)}: {stage.name}")
            try:
                value = await stage.run(value)
            except Exception:
                log.debug(f"[{self.name}] stopped at stage '{stage.name}'.")
                raise
        return value
