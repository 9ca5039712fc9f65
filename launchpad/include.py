from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from string import Template
from typing import Any, Dict, List, Mapping, Optional, Sequence

import jsonschema
import yaml

from launchpad.core.errors import IncludeFileError
from launchpad.core.profile import DEFAULT_PROFILE, Profile
from launchpad.resources import include_schema_path


@dataclass(frozen=True)
class IncludeOverrides:
    """
    Typed view of an include file. Unset keys are None (or empty).
    """

    path: Path
    java_home: Optional[str] = None
    module_list: Optional[str] = None
    java_opts: Optional[str] = None
    options_file: Optional[str] = None
    startup_sleep: Optional[float] = None
    environment: Dict[str, str] = field(default_factory=dict)


def candidate_paths(
    root: Path,
    launcher_dir: Path,
    profile: Profile = DEFAULT_PROFILE,
    *,
    home: Optional[Path] = None,
) -> List[Path]:
    """
    Fixed search order: system-wide shared locations, user home, install
    root, then the launcher's own directory.
    """
    name = profile.include_name
    user_home = home if home is not None else Path("~").expanduser()
    return [
        Path("/usr/share") / profile.app_name / name,
        Path("/usr/local/share") / profile.app_name / name,
        Path("/opt") / profile.app_name / name,
        user_home / f".{name}",
        root / "bin" / name,
        launcher_dir / name,
    ]


def _readable(p: Path) -> bool:
    return p.is_file() and os.access(p, os.R_OK)


def resolve_include_path(
    environ: Mapping[str, str],
    candidates: Sequence[Path],
    profile: Profile = DEFAULT_PROFILE,
) -> Optional[Path]:
    """
    - override unset: first readable candidate, or None
    - override set to "": inclusion disabled
    - override set but unreadable: skipped silently
    """
    if profile.include_var in environ:
        override = environ[profile.include_var]
        if not override:
            return None
        p = Path(override)
        return p if _readable(p) else None

    for p in candidates:
        if _readable(p):
            return p
    return None


_SCHEMA: Optional[Dict[str, Any]] = None


def _include_schema() -> Dict[str, Any]:
    global _SCHEMA
    if _SCHEMA is None:
        _SCHEMA = json.loads(include_schema_path().read_text(encoding="utf-8"))
    return _SCHEMA


def validate_include(instance: Any) -> List[str]:
    """
    Validates a parsed include document and returns error strings (empty means valid).
    """
    validator = jsonschema.Draft202012Validator(_include_schema())
    errors = []
    for e in sorted(validator.iter_errors(instance), key=str):
        where = "/".join(str(x) for x in e.absolute_path)
        errors.append(f"{where}: {e.message}" if where else e.message)
    # .inf satisfies "minimum" and nan compares false against it
    sleep = instance.get("startup_sleep") if isinstance(instance, dict) else None
    if isinstance(sleep, float) and not math.isfinite(sleep):
        errors.append(f"startup_sleep: {sleep!r} is not a finite number")
    return errors


def _expand(value: str, variables: Mapping[str, str]) -> str:
    # $VAR and ${VAR}; unknown names are left untouched.
    return Template(value).safe_substitute(variables)


def load_include(path: Path, variables: Mapping[str, str]) -> IncludeOverrides:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise IncludeFileError(
            code="include.invalid",
            message=f"Cannot parse include file: {path}",
            data={"path": str(path), "error": repr(e)},
        ) from e
    if raw is None:
        raw = {}

    errors = validate_include(raw)
    if errors:
        raise IncludeFileError(
            code="include.invalid",
            message=f"Include file does not validate against include.schema.json: {path}",
            data={"path": str(path), "errors": errors},
        )

    def s(key: str) -> Optional[str]:
        v = raw.get(key)
        return _expand(v, variables) if isinstance(v, str) else None

    module_list = raw.get("module_list")
    if isinstance(module_list, list):
        module_list = os.pathsep.join(_expand(x, variables) for x in module_list)
    elif isinstance(module_list, str):
        module_list = _expand(module_list, variables)

    java_opts = raw.get("java_opts")
    if isinstance(java_opts, list):
        java_opts = " ".join(_expand(x, variables) for x in java_opts)
    elif isinstance(java_opts, str):
        java_opts = _expand(java_opts, variables)

    sleep = raw.get("startup_sleep")
    env_raw = raw.get("environment") or {}
    environment = {}
    for k, v in env_raw.items():
        if isinstance(v, bool):
            v = "true" if v else "false"
        environment[k] = _expand(str(v), variables)

    return IncludeOverrides(
        path=path,
        java_home=s("java_home"),
        module_list=module_list,
        java_opts=java_opts,
        options_file=s("options_file"),
        startup_sleep=float(sleep) if sleep is not None else None,
        environment=environment,
    )
