import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import patch

from launchpad.cli.launch import main as launch_main
from launchpad.testing import make_install


class TestLaunchCli(unittest.TestCase):
    def _run(self, argv, *, launcher_path, environ):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            rc = launch_main(argv, launcher_path=str(launcher_path), environ=environ)
        return rc, out.getvalue(), err.getvalue()

    def test_deprecated_variables_exit_failure_with_remediation(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            env = inst.environ(ES_INCLUDE="", ES_HEAP_SIZE="2g", ES_GC_OPTS="-XX:+UseSerialGC")
            rc, _out, err = self._run([], launcher_path=inst.launcher, environ=env)
            self.assertEqual(rc, 1)
            lines = err.splitlines()
            self.assertTrue(lines[0].startswith("env.deprecated: "))
            self.assertTrue(any(l.startswith("ES_HEAP_SIZE=2g: ") for l in lines))
            self.assertTrue(any(l.startswith("ES_GC_OPTS=-XX:+UseSerialGC: ") for l in lines))

    def test_missing_module_list_exit_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            env = inst.environ(ES_INCLUDE="")
            env.pop("ES_CLASSPATH")
            with patch("launchpad.launcher.os.execve") as execve:
                rc, _out, err = self._run([], launcher_path=inst.launcher, environ=env)
            self.assertEqual(rc, 1)
            self.assertIn("You must set the ES_CLASSPATH var", err)
            execve.assert_not_called()

    def test_missing_runtime_exit_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            (Path(td) / "empty").mkdir()
            env = inst.environ(ES_INCLUDE="", JAVA_HOME=str(Path(td) / "nojdk"), PATH=str(Path(td) / "empty"))
            rc, _out, err = self._run([], launcher_path=inst.launcher, environ=env)
            self.assertEqual(rc, 1)
            self.assertIn("runtime.not_found", err)

    def test_build_not_found_exit_failure(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            (inst.root / "lib").rmdir()
            rc, _out, err = self._run([], launcher_path=inst.launcher, environ=inst.environ(ES_INCLUDE=""))
            self.assertEqual(rc, 1)
            self.assertIn("install.build_not_found", err)

    def test_include_errors_are_listed(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            include = Path(td) / "bad.yml"
            include.write_text("heap: 2g\n", encoding="utf-8")
            rc, _out, err = self._run([], launcher_path=inst.launcher, environ=inst.environ(ES_INCLUDE=str(include)))
            self.assertEqual(rc, 1)
            self.assertIn("include.invalid", err)
            self.assertIn("\n- ", err)

    def test_symlinked_launcher_dry_run_matches_direct(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            inst = make_install(base)
            (base / "a").mkdir()
            (base / "b").mkdir()
            os.symlink(str(inst.launcher), base / "b" / "es")
            os.symlink("../b/es", base / "a" / "es")
            env = inst.environ(ES_INCLUDE="", ES_LAUNCH_DRY_RUN="1")

            rc1, out1, _ = self._run(["-d"], launcher_path=inst.launcher, environ=env)
            rc2, out2, _ = self._run(["-d"], launcher_path=base / "a" / "es", environ=env)
            self.assertEqual((rc1, rc2), (0, 0))
            d1, d2 = json.loads(out1), json.loads(out2)
            self.assertEqual(d1["config"]["install_root"], str(inst.root))
            self.assertEqual(d1["config"]["install_root"], d2["config"]["install_root"])
            self.assertEqual(d1["command"], d2["command"])


if __name__ == "__main__":
    unittest.main()
