from __future__ import annotations

import sys
from typing import Mapping, Optional, Sequence

from launchpad.core.errors import LaunchpadError
from launchpad.launcher import Launcher


def _format_cli_error(e: Exception) -> str:
    """
    Print-friendly error formatting for the launcher.
    - Always includes code/message (via __str__) when it's a LaunchpadError
    - Followed by one remediation line per offending setting, when present
    - Include-file validation errors are listed one per line
    """
    text = str(e)
    if isinstance(e, LaunchpadError) and isinstance(e.data, dict):
        for line in e.data.get("remediations") or []:
            text += "\n" + line
        for line in e.data.get("errors") or []:
            text += "\n- " + line
    return text


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    launcher_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Launch the managed process. Arguments are passed through untouched; only
    `-d` / `--daemonize` is looked at, to choose detached mode.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    path = launcher_path or sys.argv[0]
    launcher = Launcher(environ=environ)
    try:
        result = launcher.run(path, args)
    except LaunchpadError as e:
        print(_format_cli_error(e), file=sys.stderr)
        return 1
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
