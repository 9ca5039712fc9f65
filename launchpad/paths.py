from __future__ import annotations

import os
from pathlib import Path

from launchpad.core.errors import InstallRootError


def resolve_launcher_path(path: str | os.PathLike) -> Path:
    """
    Follow a chain of symbolic links until a non-link path is reached.

    Relative link targets are interpreted against the directory holding the
    link, not the current working directory. Link depth is not bounded: a
    cyclic chain does not terminate.
    """
    current = os.fspath(path)
    while os.path.islink(current):
        target = os.readlink(current)
        if os.path.isabs(target):
            current = target
        else:
            current = os.path.join(os.path.dirname(current), target)
    return Path(current)


def install_root(launcher_path: str | os.PathLike) -> Path:
    """
    Installation root: the parent of the directory containing the launcher.

    The result is made absolute logically (like `cd <dir>/..; pwd`), so
    symlinked directories above the launcher are kept as-is.
    """
    concrete = resolve_launcher_path(launcher_path)
    candidate = os.path.join(os.path.dirname(concrete) or ".", "..")
    root = os.path.abspath(candidate)
    if not os.path.isdir(root):
        raise InstallRootError(
            code="install.root_invalid",
            message=f"Install root is not a directory: {root}",
            data={"launcher_path": str(launcher_path)},
        )
    if not os.access(root, os.X_OK):
        raise InstallRootError(
            code="install.root_invalid",
            message=f"Cannot enter install root (permission denied): {root}",
            data={"launcher_path": str(launcher_path)},
        )
    return Path(root)


def require_build(root: Path) -> None:
    # A source checkout has bin/ but no assembled lib/ directory.
    lib_dir = root / "lib"
    if not lib_dir.is_dir():
        raise InstallRootError(
            code="install.build_not_found",
            message=f"No built distribution found under {root} (missing {lib_dir}); build or unpack the distribution first",
            data={"install_root": str(root)},
        )
