from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

import yaml

from launchpad.cli.launch import _format_cli_error
from launchpad.core.errors import IncludeFileError
from launchpad.include import resolve_include_path, validate_include
from launchpad.launcher import Launcher, detect_mode
from launchpad.paths import install_root
from launchpad.trace.replay import Replay


def _default_launcher_path() -> str:
    return sys.argv[0]


def cmd_show_config(args: argparse.Namespace) -> int:
    launcher = Launcher()
    config = launcher.resolve(args.launcher)
    passthrough = list(args.args or [])
    if passthrough and passthrough[0] == "--":
        passthrough = passthrough[1:]
    out = {
        "mode": detect_mode(passthrough),
        "command": launcher.build_command(config, passthrough) if config.module_list else None,
        "config": config.to_dict(),
    }
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0


def cmd_include_candidates(args: argparse.Namespace) -> int:
    launcher = Launcher()
    root = install_root(args.launcher)
    candidates = launcher.include_candidates(root, Path(args.launcher).parent)
    selected = resolve_include_path(os.environ, candidates)
    rows = [{"path": str(p), "exists": p.is_file(), "selected": p == selected} for p in candidates]
    if args.json:
        print(json.dumps(rows, ensure_ascii=False, indent=2))
    else:
        for r in rows:
            mark = "*" if r["selected"] else ("+" if r["exists"] else "-")
            print(f"{mark} {r['path']}")
    return 0


def cmd_check_include(args: argparse.Namespace) -> int:
    path = Path(args.path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise IncludeFileError(code="include.invalid", message=f"Cannot parse include file: {path}") from e
    errors = validate_include({} if raw is None else raw)
    if errors:
        print(f"Include file failed validation: {path}")
        for e in errors:
            print(f"- {e}")
        return 1
    print("Include OK")
    return 0


def cmd_show_trace(args: argparse.Namespace) -> int:
    path = Path(args.trace)
    replay = Replay(path)
    events = list(replay.iter_events())

    if args.event_type:
        events = [e for e in events if e.get("event_type") == args.event_type]

    if args.tail is not None and args.tail >= 0:
        events = events[-args.tail :]

    if args.pretty:
        for e in events:
            print(json.dumps(e, ensure_ascii=False, indent=2))
    else:
        for e in events:
            print(json.dumps(e, ensure_ascii=False))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="launchpad-admin", description="Inspect launcher configuration")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_show = sub.add_parser("show-config", help="Resolve configuration and print the command (no launch)")
    p_show.add_argument("--launcher", default=_default_launcher_path(), help="Launcher path used to derive the install root")
    p_show.add_argument("args", nargs=argparse.REMAINDER, help="Arguments that would be passed to the managed process")
    p_show.set_defaults(func=cmd_show_config)

    p_cand = sub.add_parser("include-candidates", help="List include file search order")
    p_cand.add_argument("--launcher", default=_default_launcher_path(), help="Launcher path used to derive the install root")
    p_cand.add_argument("--json", action="store_true", help="Output JSON")
    p_cand.set_defaults(func=cmd_include_candidates)

    p_check = sub.add_parser("check-include", help="Validate an include file against its schema")
    p_check.add_argument("path", help="Include file (YAML)")
    p_check.set_defaults(func=cmd_check_include)

    p_trace = sub.add_parser("show-trace", help="Show launch trace events from a JSONL file")
    p_trace.add_argument("--trace", required=True, help="Trace path (jsonl)")
    p_trace.add_argument("--event-type", help="Filter by event_type")
    p_trace.add_argument("--tail", type=int, help="Show only last N events")
    p_trace.add_argument("--pretty", action="store_true", help="Pretty-print each event as JSON")
    p_trace.set_defaults(func=cmd_show_trace)

    ns = parser.parse_args(argv)
    try:
        return int(ns.func(ns))
    except Exception as e:  # noqa: BLE001
        print(_format_cli_error(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
