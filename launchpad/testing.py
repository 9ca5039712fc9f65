from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class FakeInstall:
    """
    On-disk installation layout for tests/examples:

      <root>/bin/<launcher>
      <root>/lib/
      <root>/config/jvm.options
      <jdk>/bin/java
    """

    root: Path
    launcher: Path
    java_home: Path
    java: Path

    def environ(self, **extra: str) -> Dict[str, str]:
        env = {
            "PATH": os.defpath,
            "JAVA_HOME": str(self.java_home),
            "ES_CLASSPATH": str(self.root / "lib" / "*"),
        }
        env.update(extra)
        return env


def write_executable(path: Path, script: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(script, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def make_install(
    base: Path,
    *,
    name: str = "elasticsearch",
    options: Optional[str] = None,
    java_script: str = "#!/bin/sh\nexit 0\n",
) -> FakeInstall:
    root = base / name
    launcher = write_executable(root / "bin" / name, "#!/bin/sh\nexit 0\n")
    (root / "lib").mkdir(parents=True, exist_ok=True)
    if options is not None:
        (root / "config").mkdir(parents=True, exist_ok=True)
        (root / "config" / "jvm.options").write_text(options, encoding="utf-8")
    java_home = base / "jdk"
    java = write_executable(java_home / "bin" / "java", java_script)
    return FakeInstall(root=root, launcher=launcher, java_home=java_home, java=java)
