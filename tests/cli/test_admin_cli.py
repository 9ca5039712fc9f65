import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from launchpad.cli.admin import main as admin_main
from launchpad.testing import make_install


class TestAdminCli(unittest.TestCase):
    def test_check_include_ok_and_invalid(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            good = Path(td) / "good.yml"
            good.write_text("module_list: [\"/srv/es/lib/*\"]\nstartup_sleep: 1\n", encoding="utf-8")
            bad = Path(td) / "bad.yml"
            bad.write_text("startup_sleep: soon\n", encoding="utf-8")

            buf = io.StringIO()
            with redirect_stdout(buf):
                rc = admin_main(["check-include", str(good)])
            self.assertEqual(rc, 0)
            self.assertIn("Include OK", buf.getvalue())

            buf = io.StringIO()
            with redirect_stdout(buf):
                rc = admin_main(["check-include", str(bad)])
            self.assertEqual(rc, 1)
            self.assertIn("startup_sleep", buf.getvalue())

    def test_show_trace_tail(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "t.jsonl"
            p.write_text(
                "\n".join(
                    [
                        json.dumps({"ts": "2026-10-18T00:00:00Z", "run_id": "r1", "event_type": "launch_started"}),
                        json.dumps({"ts": "2026-10-18T00:00:01Z", "run_id": "r1", "event_type": "liveness_check"}),
                    ]
                )
                + "\n",
                encoding="utf-8",
            )
            buf = io.StringIO()
            with redirect_stdout(buf):
                rc = admin_main(["show-trace", "--trace", str(p), "--tail", "1"])
            self.assertEqual(rc, 0)
            lines = [l for l in buf.getvalue().splitlines() if l.strip()]
            self.assertEqual(len(lines), 1)
            self.assertEqual(json.loads(lines[0])["event_type"], "liveness_check")

    def test_include_candidates_marks_selection(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td))
            local = inst.root / "bin" / "elasticsearch.in.yml"
            local.write_text("{}\n", encoding="utf-8")
            buf = io.StringIO()
            with patch.dict(os.environ, {"HOME": td}), redirect_stdout(buf):
                os.environ.pop("ES_INCLUDE", None)
                rc = admin_main(["include-candidates", "--launcher", str(inst.launcher), "--json"])
            self.assertEqual(rc, 0)
            rows = json.loads(buf.getvalue())
            self.assertEqual(len(rows), 6)
            # install-local and launcher-local coincide when the launcher is not a symlink
            self.assertEqual([r["path"] for r in rows if r["selected"]], [str(local), str(local)])
            self.assertFalse(any(r["selected"] for r in rows[:4]))

    def test_show_config_does_not_launch(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            inst = make_install(Path(td), options="-Xmx1g\n")
            buf = io.StringIO()
            with patch.dict(os.environ, inst.environ(ES_INCLUDE="")), patch(
                "launchpad.launcher.os.execve"
            ) as execve, redirect_stdout(buf):
                rc = admin_main(["show-config", "--launcher", str(inst.launcher), "--", "-d"])
            self.assertEqual(rc, 0)
            execve.assert_not_called()
            out = json.loads(buf.getvalue())
            self.assertEqual(out["mode"], "detached")
            self.assertEqual(out["config"]["flags"], ["-Xmx1g"])
            self.assertIn("-Xmx1g", out["command"])


if __name__ == "__main__":
    unittest.main()
