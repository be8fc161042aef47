"""Sequential phase runner for the file-to-file graph pipeline.

Each phase reads the shared context and returns only the keys it adds.
A phase may name the context keys it ``requires``; the runner checks them
before the phase runs, so a misordered pipeline fails with the phase name
instead of deep inside the phase.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class PipelinePhase(ABC):
    phase_name: str
    requires: Tuple[str, ...] = ()

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    def __init__(self, phases: Iterable[PipelinePhase], log: Optional[logging.Logger] = None) -> None:
        self.phases: List[PipelinePhase] = list(phases)
        self._log = log or logger

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        current = dict(context)
        completed: List[str] = []
        for phase in self.phases:
            missing = [key for key in phase.requires if key not in current]
            if missing:
                raise ValueError(f"Phase '{phase.phase_name}' is missing context keys: {', '.join(missing)}")

            self._log.debug("Running phase %s with keys %s", phase.phase_name, sorted(current))
            produced = phase.run(current)
            if not isinstance(produced, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(produced)
            completed.append(phase.phase_name)

        current["completed_phases"] = completed
        return current
