from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .profile import DEFAULT_PROFILE, Profile


@dataclass(frozen=True)
class LaunchConfig:
    """
    Resolved configuration for one launcher invocation.

    Hard rules:
    - Built once by the pipeline, never mutated (use dataclasses.replace).
    - `environment` is the child's environment; os.environ is never touched.
    """

    install_root: Path
    launcher_path: Path
    profile: Profile = DEFAULT_PROFILE
    options_file: Path | None = None
    include_path: Path | None = None
    flags: tuple[str, ...] = ()
    java_home: str | None = None
    runtime_executable: Path | None = None
    module_list: str | None = None
    startup_sleep: float | None = None
    environment: dict[str, str] = field(default_factory=dict)
    run_id: str = "launch"
    dry_run: bool = False
    trace_path: Path | None = None

    @property
    def flag_string(self) -> str:
        return " ".join(self.flags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "app_name": self.profile.app_name,
            "install_root": str(self.install_root),
            "launcher_path": str(self.launcher_path),
            "options_file": str(self.options_file) if self.options_file else None,
            "include_path": str(self.include_path) if self.include_path else None,
            "flags": list(self.flags),
            "java_home": self.java_home,
            "runtime_executable": str(self.runtime_executable) if self.runtime_executable else None,
            "module_list": self.module_list,
            "startup_sleep": self.startup_sleep,
            "dry_run": self.dry_run,
        }
