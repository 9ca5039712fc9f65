import tempfile
import unittest
from pathlib import Path

from launchpad.core.errors import RuntimeNotFound
from launchpad.runtime_locator import locate_runtime
from launchpad.testing import write_executable


class TestRuntimeLocator(unittest.TestCase):
    def test_prefers_java_home(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            java = write_executable(base / "jdk" / "bin" / "java", "#!/bin/sh\n")
            write_executable(base / "path" / "java", "#!/bin/sh\n")
            found = locate_runtime(str(base / "jdk"), search_path=str(base / "path"))
            self.assertEqual(found, java)

    def test_falls_back_to_search_path(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            (base / "jdk" / "bin").mkdir(parents=True)
            (base / "jdk" / "bin" / "java").write_text("not executable", encoding="utf-8")
            on_path = write_executable(base / "path" / "java", "#!/bin/sh\n")
            self.assertEqual(locate_runtime(str(base / "jdk"), search_path=str(base / "path")), on_path)
            self.assertEqual(locate_runtime(None, search_path=str(base / "path")), on_path)

    def test_missing_everywhere_is_fatal(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            base = Path(td)
            (base / "empty").mkdir()
            with self.assertRaises(RuntimeNotFound) as cm:
                locate_runtime(str(base / "jdk"), search_path=str(base / "empty"))
            self.assertEqual(cm.exception.code, "runtime.not_found")
            self.assertIn("JAVA_HOME", cm.exception.message)


if __name__ == "__main__":
    unittest.main()
