from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, List, Optional, Sequence

from .env import Env
from .errors import BuildpackError, EnvError
from .models import Buildpack, BuildMetadata, DevelopMetadata, Process, processes_from_toml
from .processes import ProcessMap
from .utils import (
    CommandError,
    each_dir,
    ensure_directory,
    env_list_to_mapping,
    list_entries,
    load_toml,
    run_command,
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    BUILD = "build"
    DEVELOP = "develop"

    @property
    def output_file(self) -> str:
        return "launch.toml" if self is Phase.BUILD else "develop.toml"


def setup_env(env: Env, cache_dir: str | Path) -> None:
    """Compose every layer in ``cache_dir`` into ``env``.

    Layers are applied in three passes so that all directory contributions
    land before any overwrite, and all overwrites before any additive value.
    """

    cache_dir = Path(cache_dir)
    layers = list_entries(cache_dir)
    layer_count = sum(1 for entry in layers if entry.is_dir())
    each_dir(layers, lambda layer: env.append_dirs(layer))
    each_dir(layers, lambda layer: env.set_env_dir(layer / "env" / "set"))
    each_dir(layers, lambda layer: env.add_env_dir(layer / "env" / "add"))
    logger.debug("composed %d layers from %s", layer_count, cache_dir)


@dataclass
class Builder:
    """Runs a buildpack group in order and merges the processes it declares."""

    platform_dir: Path
    buildpacks: Sequence[Buildpack] = field(default_factory=list)
    out: Optional[IO] = None
    err: Optional[IO] = None

    def __post_init__(self) -> None:
        self.platform_dir = Path(self.platform_dir).absolute()

    def build(
        self,
        app_dir: str | Path,
        launch_dir: str | Path,
        cache_dir: str | Path,
        env: Env,
    ) -> BuildMetadata:
        procs = ProcessMap()
        for bp in self.buildpacks:
            bp_launch_dir = Path(launch_dir).absolute() / bp.id
            bp_cache_dir = Path(cache_dir).absolute() / bp.id
            self._create_dirs(bp, Phase.BUILD, bp_launch_dir, bp_cache_dir)
            self._exec(bp, Phase.BUILD, app_dir, env, [bp_launch_dir, bp_cache_dir, self.platform_dir])
            procs.add(self._decode(bp, Phase.BUILD, bp_launch_dir / Phase.BUILD.output_file))
            self._compose(bp, Phase.BUILD, env, bp_cache_dir)
        return BuildMetadata(processes=procs.list())

    def develop(self, app_dir: str | Path, cache_dir: str | Path, env: Env) -> DevelopMetadata:
        procs = ProcessMap()
        for bp in self.buildpacks:
            bp_cache_dir = Path(cache_dir).absolute() / bp.id
            self._create_dirs(bp, Phase.DEVELOP, bp_cache_dir)
            self._exec(bp, Phase.DEVELOP, app_dir, env, [bp_cache_dir, self.platform_dir])
            procs.add(self._decode(bp, Phase.DEVELOP, bp_cache_dir / Phase.DEVELOP.output_file))
            self._compose(bp, Phase.DEVELOP, env, bp_cache_dir)
        return DevelopMetadata(processes=procs.list())

    def _create_dirs(self, bp: Buildpack, phase: Phase, *dirs: Path) -> None:
        for path in dirs:
            try:
                ensure_directory(path)
            except OSError as exc:
                raise BuildpackError(bp.id, phase.value, "mkdir", str(exc)) from exc

    def _exec(
        self,
        bp: Buildpack,
        phase: Phase,
        app_dir: str | Path,
        env: Env,
        args: Sequence[Path],
    ) -> None:
        command = [str(bp.executable(phase.value)), *(str(arg) for arg in args)]
        logger.info("running %s for buildpack %s", phase.value, bp.id)
        try:
            run_command(
                command,
                cwd=app_dir,
                env=env_list_to_mapping(env.list()),
                stdout=self.out,
                stderr=self.err,
            )
        except (CommandError, OSError) as exc:
            raise BuildpackError(bp.id, phase.value, "exec", str(exc)) from exc
        logger.info("buildpack %s finished %s", bp.id, phase.value)

    def _decode(self, bp: Buildpack, phase: Phase, path: Path) -> List[Process]:
        try:
            return processes_from_toml(load_toml(path))
        except (OSError, ValueError) as exc:
            raise BuildpackError(bp.id, phase.value, "decode", f"{path}: {exc}") from exc

    def _compose(self, bp: Buildpack, phase: Phase, env: Env, bp_cache_dir: Path) -> None:
        try:
            setup_env(env, bp_cache_dir)
        except (OSError, EnvError) as exc:
            raise BuildpackError(bp.id, phase.value, "env", str(exc)) from exc
