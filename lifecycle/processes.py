from __future__ import annotations

from typing import Dict, Iterable, List

from .models import Process


class ProcessMap:
    """Process declarations keyed by type; later declarations replace earlier ones."""

    def __init__(self) -> None:
        self._procs: Dict[str, Process] = {}

    def add(self, processes: Iterable[Process]) -> None:
        for proc in processes:
            self._procs[proc.type] = proc

    def list(self) -> List[Process]:
        return [self._procs[key] for key in sorted(self._procs)]

    def __len__(self) -> int:
        return len(self._procs)

    def __contains__(self, proc_type: str) -> bool:
        return proc_type in self._procs
