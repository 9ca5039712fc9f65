from __future__ import annotations

import json
import math
import os
import re
import socket
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, TextIO

from launchpad.core.errors import ConfigurationRejected, LaunchFailed, LaunchpadError
from launchpad.core.launch_config import LaunchConfig
from launchpad.core.profile import DEFAULT_PROFILE, Profile
from launchpad.env_check import check_environment
from launchpad.include import IncludeOverrides, candidate_paths, load_include, resolve_include_path
from launchpad.options_file import parse_options_file, resolve_options_path
from launchpad.paths import install_root, require_build, resolve_launcher_path
from launchpad.runtime_locator import locate_runtime
from launchpad.trace.trace_emitter import TraceEmitter


ATTACHED = "attached"
DETACHED = "detached"

_DETACH_RE = re.compile(r"(?:^|\s)(?:-d|--daemonize)(?=\s|$)")
_TRUTHY = ("1", "true", "yes")


def detect_mode(args: Sequence[str]) -> str:
    """
    Detached iff `-d` or `--daemonize` appears as a whole word in the
    space-joined argument string.
    """
    return DETACHED if _DETACH_RE.search(" ".join(args)) else ATTACHED


def short_hostname() -> str:
    return socket.gethostname().split(".", 1)[0]


@dataclass(frozen=True)
class LaunchResult:
    mode: str
    exit_code: int
    command: List[str]
    pid: Optional[int] = None
    process: Optional[subprocess.Popen] = field(default=None, compare=False, repr=False)


class Launcher:
    """
    Configuration resolution and launch: Path -> Environment check -> Include
    -> Options file -> Runtime -> Launch.

    Hard rules:
    - every fatal condition raises a LaunchpadError before anything is spawned,
      except detached spawn/liveness failures.
    - the caller's environment mapping is read, never mutated.
    - every decision is traced.
    """

    def __init__(
        self,
        profile: Profile = DEFAULT_PROFILE,
        *,
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._profile = profile
        self._environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self._home = home
        self._stdout = stdout
        self._stderr = stderr
        trace_path = self._environ.get(profile.trace_var)
        self._trace = TraceEmitter.for_path(Path(trace_path) if trace_path else None, run_id=f"launch_{os.getpid()}")

    @property
    def trace(self) -> TraceEmitter:
        return self._trace

    def _warn(self, text: str) -> None:
        print(f"warning: {text}", file=self._stderr or sys.stderr)
        self._trace.emit("warning", message=text)

    def include_candidates(self, root: Path, launcher_dir: Path) -> List[Path]:
        home = self._home
        if home is None and self._environ.get("HOME"):
            home = Path(self._environ["HOME"])
        return candidate_paths(root, launcher_dir, self._profile, home=home)

    def resolve(self, launcher_path: str | os.PathLike) -> LaunchConfig:
        profile = self._profile
        env = self._environ

        concrete = resolve_launcher_path(launcher_path)
        root = install_root(concrete)
        self._trace.emit(
            "launch_started",
            message="Resolving launch configuration",
            data={"launcher_path": str(launcher_path), "install_root": str(root)},
        )

        check_environment(env, profile)
        require_build(root)

        include_path = resolve_include_path(env, self.include_candidates(root, Path(launcher_path).parent), profile)
        overrides: Optional[IncludeOverrides] = None
        if include_path is not None:
            variables = dict(env)
            variables[profile.home_var] = str(root)
            overrides = load_include(include_path, variables)
            self._trace.emit("include_applied", message="Include file applied", data={"path": str(include_path)})

        def pick(var: str, from_include: Optional[str]) -> Optional[str]:
            # Environment wins over the include file.
            v = env.get(var)
            return v if v else from_include

        options_env = dict(env)
        if not env.get(profile.options_file_var) and overrides is not None and overrides.options_file:
            options_env[profile.options_file_var] = overrides.options_file
        options_path = resolve_options_path(options_env, root, profile)
        file_flags = parse_options_file(options_path)
        self._trace.emit("options_parsed", data={"path": str(options_path), "flags": file_flags})

        flags: List[str] = file_flags.split()
        if overrides is not None and overrides.java_opts:
            flags.extend(overrides.java_opts.split())
        flags.extend(env.get(profile.java_opts_var, "").split())

        java_home = pick("JAVA_HOME", overrides.java_home if overrides else None)
        module_list = pick(profile.classpath_var, overrides.module_list if overrides else None)
        startup_sleep = self._startup_sleep(overrides)

        runtime = locate_runtime(java_home, name=profile.runtime_name, search_path=env.get("PATH"))
        self._trace.emit("runtime_located", data={"path": str(runtime)})

        child_env = dict(env)
        if overrides is not None:
            for k, v in overrides.environment.items():
                if not child_env.get(k):
                    child_env[k] = v

        return LaunchConfig(
            install_root=root,
            launcher_path=concrete,
            profile=profile,
            options_file=options_path,
            include_path=include_path,
            flags=tuple(flags),
            java_home=java_home,
            runtime_executable=runtime,
            module_list=module_list,
            startup_sleep=startup_sleep,
            environment=child_env,
            run_id=self._trace.run_id,
            dry_run=str(env.get(profile.dry_run_var, "")).strip().lower() in _TRUTHY,
            trace_path=Path(env[profile.trace_var]) if env.get(profile.trace_var) else None,
        )

    def _startup_sleep(self, overrides: Optional[IncludeOverrides]) -> Optional[float]:
        var = self._profile.startup_sleep_var
        raw = self._environ.get(var)
        if not raw:
            return overrides.startup_sleep if overrides is not None else None
        try:
            value = float(raw)
        except ValueError:
            value = -1.0
        # nan passes the sign test
        if value < 0 or not math.isfinite(value):
            raise ConfigurationRejected(
                code="config.startup_sleep_invalid",
                message=f"{var} must be a non-negative number of seconds, got {raw!r}",
                data={"variable": var, "value": raw},
            )
        return value

    def child_environment(self, config: LaunchConfig) -> Dict[str, str]:
        """
        Final environment for the managed process; emits soft warnings.
        """
        profile = config.profile
        env = dict(config.environment)
        if env.get("JAVA_TOOL_OPTIONS"):
            self._warn(
                f"ignoring JAVA_TOOL_OPTIONS={env['JAVA_TOOL_OPTIONS']}; pass JVM parameters via {profile.java_opts_var}"
            )
            del env["JAVA_TOOL_OPTIONS"]
        if env.get("JAVA_OPTS"):
            self._warn(f"ignoring JAVA_OPTS={env['JAVA_OPTS']}; pass JVM parameters via {profile.java_opts_var}")
        env["HOSTNAME"] = short_hostname()
        env[profile.home_var] = str(config.install_root)
        return env

    def build_command(self, config: LaunchConfig, args: Sequence[str]) -> List[str]:
        profile = config.profile
        return [
            str(config.runtime_executable),
            *config.flags,
            f"-D{profile.path_home_property}={config.install_root}",
            "-cp",
            str(config.module_list),
            profile.main_class,
            *args,
        ]

    def launch(self, config: LaunchConfig, args: Sequence[str]) -> LaunchResult:
        if not config.module_list:
            raise ConfigurationRejected(
                code="config.module_list_missing",
                message=f"You must set the {config.profile.classpath_var} var",
            )

        env = self.child_environment(config)
        command = self.build_command(config, args)
        mode = detect_mode(args)

        if config.dry_run:
            out: Dict[str, Any] = {"mode": mode, "command": command, "config": config.to_dict()}
            print(json.dumps(out, ensure_ascii=False, indent=2), file=self._stdout or sys.stdout)
            return LaunchResult(mode=mode, exit_code=0, command=command)

        if mode == ATTACHED:
            return self._exec(command, env)
        return self._spawn_detached(config, command, env)

    def _exec(self, command: List[str], env: Dict[str, str]) -> LaunchResult:
        self._trace.emit("launch_attached", data={"command": command})
        for stream in (sys.stdout, sys.stderr):
            stream.flush()
        try:
            os.execve(command[0], command, env)
        except OSError as e:
            raise LaunchFailed(code="launch.exec_failed", message=f"Cannot execute {command[0]}: {e}") from e
        # Only reachable when execve is replaced (tests).
        return LaunchResult(mode=ATTACHED, exit_code=0, command=command)

    def _spawn_detached(self, config: LaunchConfig, command: List[str], env: Dict[str, str]) -> LaunchResult:
        try:
            proc = subprocess.Popen(command, env=env, stdin=subprocess.DEVNULL, start_new_session=True)
        except OSError as e:
            raise LaunchFailed(code="launch.spawn_failed", message=f"Cannot start {command[0]}: {e}") from e
        self._trace.emit("launch_detached", data={"pid": proc.pid, "command": command})

        if config.startup_sleep:
            time.sleep(config.startup_sleep)

        returncode = proc.poll()
        alive = returncode is None
        self._trace.emit("liveness_check", data={"pid": proc.pid, "alive": alive, "returncode": returncode})
        if not alive:
            raise LaunchFailed(
                code="launch.died",
                message=f"Process {proc.pid} exited during startup",
                data={"pid": proc.pid, "returncode": returncode},
            )
        return LaunchResult(mode=DETACHED, exit_code=0, command=command, pid=proc.pid, process=proc)

    def run(self, launcher_path: str | os.PathLike, args: Sequence[str]) -> LaunchResult:
        try:
            config = self.resolve(launcher_path)
            return self.launch(config, args)
        except LaunchFailed as e:
            self._trace.emit("launch_failed", message=str(e), data=e.data)
            raise
        except LaunchpadError as e:
            self._trace.emit("config_rejected", message=str(e), data=e.data)
            raise

