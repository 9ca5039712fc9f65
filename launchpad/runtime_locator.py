from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

from launchpad.core.errors import RuntimeNotFound


def _is_executable(p: Path) -> bool:
    return p.is_file() and os.access(p, os.X_OK)


def locate_runtime(java_home: Optional[str], *, name: str = "java", search_path: Optional[str] = None) -> Path:
    """
    Prefer <java_home>/bin/<name>; fall back to a PATH search.
    """
    if java_home:
        candidate = Path(java_home) / "bin" / name
        if _is_executable(candidate):
            return candidate

    found = shutil.which(name, path=search_path)
    if found and _is_executable(Path(found)):
        return Path(found)

    raise RuntimeNotFound(
        code="runtime.not_found",
        message=f"Could not find any executable {name} binary. Please install {name} in your PATH or set JAVA_HOME",
        data={"java_home": java_home},
    )
