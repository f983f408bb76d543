from __future__ import annotations

from typing import Optional


class LifecycleError(RuntimeError):
    """Base class for failures that abort a lifecycle run."""


class GroupError(LifecycleError):
    """Raised when the buildpack group file cannot be parsed."""


class EnvError(LifecycleError):
    """Raised when the environment store cannot read a layer's env directory."""


class BuildpackError(LifecycleError):
    """Raised when any step of a single buildpack's execution fails.

    ``step`` is one of ``mkdir``, ``exec``, ``decode`` or ``env`` and the
    underlying exception is chained as ``__cause__``.
    """

    def __init__(self, buildpack: str, phase: str, step: str, reason: Optional[str] = None) -> None:
        self.buildpack = buildpack
        self.phase = phase
        self.step = step
        message = f"buildpack {buildpack!r} failed during {phase} ({step})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
