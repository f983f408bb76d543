"""Build-phase orchestration for buildpack groups."""

from .builder import Builder, Phase, setup_env
from .env import BuildEnv, Env
from .errors import BuildpackError, EnvError, GroupError, LifecycleError
from .group import BuildpackGroup
from .models import Buildpack, BuildMetadata, DevelopMetadata, Process
from .processes import ProcessMap

__all__ = [
    "Builder",
    "BuildEnv",
    "BuildMetadata",
    "Buildpack",
    "BuildpackError",
    "BuildpackGroup",
    "DevelopMetadata",
    "Env",
    "EnvError",
    "GroupError",
    "LifecycleError",
    "Phase",
    "Process",
    "ProcessMap",
    "setup_env",
]
