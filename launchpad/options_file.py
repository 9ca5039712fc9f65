from __future__ import annotations

import os
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from launchpad.core.profile import DEFAULT_PROFILE, Profile

FLAG_MARKER = "-"


def default_options_paths(root: Path, profile: Profile = DEFAULT_PROFILE) -> List[Path]:
    return [
        root / "config" / profile.options_name,
        Path("/etc") / profile.app_name / profile.options_name,
    ]


def resolve_options_path(
    environ: Mapping[str, str],
    root: Path,
    profile: Profile = DEFAULT_PROFILE,
    *,
    candidates: Optional[Sequence[Path]] = None,
) -> Path:
    """
    Explicit override wins; otherwise the first existing default, falling
    back to the first default even when it does not exist.
    """
    override = environ.get(profile.options_file_var)
    if override:
        return Path(override)
    paths = list(candidates) if candidates is not None else default_options_paths(root, profile)
    for p in paths:
        if p.is_file():
            return p
    return paths[0]


def parse_options_text(text: str) -> str:
    flags = [line for line in text.splitlines() if line.startswith(FLAG_MARKER)]
    return " ".join(flags)


def parse_options_file(path: Optional[Path]) -> str:
    """
    Flag string from an options file; empty when the path is unset, missing
    or unreadable.

    Only lines whose first character is the flag marker are kept (a line
    starting with whitespace is dropped), in file order.
    """
    if path is None or not path.is_file() or not os.access(path, os.R_OK):
        return ""
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""
    return parse_options_text(text)
