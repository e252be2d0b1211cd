import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.executor import execute_method
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.common.errors import ArityError, UnrecognizedParameterError
from recipe_steps.src.services.filesystem.filesystem import Filesystem


def _call(method, args=(), params=None, filesystem=None):
    context = ExecutionContext(filesystem=filesystem or Filesystem())
    return execute_method(method, ParameterBag.from_call(list(args), params or {}), context)


class TestFilesystemHandlersWithMock(unittest.TestCase):
    def test_copy_file_delegates_to_filesystem(self):
        fs = MagicMock(spec=Filesystem)
        result = _call("copy_file", params={"from": "a.txt", "to": "b.txt"}, filesystem=fs)
        self.assertTrue(result.success)
        self.assertEqual(result.payload, {})
        fs.copy.assert_called_once_with("a.txt", "b.txt")

    def test_copy_file_failure_is_not_fatal(self):
        fs = MagicMock(spec=Filesystem)
        fs.copy.side_effect = PermissionError("denied")
        result = _call("copy_file", params={"from": "a.txt", "to": "b.txt"}, filesystem=fs)
        self.assertFalse(result.success)

    def test_make_dir_positional_uses_default_mode(self):
        fs = MagicMock(spec=Filesystem)
        result = _call("make_dir", args=["build"], filesystem=fs)
        self.assertTrue(result.success)
        fs.mkdir.assert_called_once_with("build", 0o777, False)

    def test_make_dir_explicit_mode(self):
        fs = MagicMock(spec=Filesystem)
        result = _call("make_dir", params={"dir": "build", "mode": 0o700}, filesystem=fs)
        self.assertTrue(result.success)
        fs.mkdir.assert_called_once_with("build", 0o700, True)

    def test_validation_error_touches_nothing(self):
        fs = MagicMock(spec=Filesystem)
        with self.assertRaises(ArityError):
            _call("mirror_dir", params={"from": "a"}, filesystem=fs)
        with self.assertRaises(UnrecognizedParameterError):
            _call("write_file", params={"filename": "a", "body": "x"}, filesystem=fs)
        fs.mirror.assert_not_called()
        fs.dump_file.assert_not_called()

    def test_remove_passes_all_paths(self):
        fs = MagicMock(spec=Filesystem)
        result = _call("remove", args=["a", "b", "c"], filesystem=fs)
        self.assertTrue(result.success)
        fs.remove.assert_called_once_with(["a", "b", "c"])

    def test_read_file_failure_returns_null_content(self):
        fs = MagicMock(spec=Filesystem)
        fs.read_file.side_effect = FileNotFoundError("missing")
        result = _call("read_file", args=["missing.txt"], filesystem=fs)
        self.assertFalse(result.success)
        self.assertEqual(result.payload, {"content": None})
        self.assertEqual(result.to_json(), '{"content": null}')


class TestFilesystemHandlersOnDisk(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_read_file(self):
        target = self.root / "test.txt"
        target.write_text("bla bla", encoding="utf-8")
        result = _call("read_file", args=[str(target)])
        self.assertTrue(result.success)
        self.assertEqual(result.payload, {"content": "bla bla"})

        named = _call("read_file", params={"filename": str(target)})
        self.assertEqual(named.payload, {"content": "bla bla"})

    def test_read_missing_file(self):
        result = _call("read_file", args=[str(self.root / "nope.txt")])
        self.assertFalse(result.success)
        self.assertEqual(result.payload, {"content": None})

    def test_write_then_read_keeps_line_endings(self):
        target = self.root / "nested" / "dir" / "out.txt"
        content = "line1\r\nline2\n"
        write = _call("write_file", params={"filename": str(target), "content": content})
        self.assertTrue(write.success)
        self.assertEqual(target.read_bytes(), content.encode("utf-8"))
        self.assertEqual(_call("read_file", args=[str(target)]).payload["content"], content)

    def test_write_file_under_a_regular_file_fails(self):
        blocker = self.root / "blocker"
        blocker.write_text("x", encoding="utf-8")
        result = _call("write_file", params={"filename": str(blocker / "out.txt"), "content": "y"})
        self.assertFalse(result.success)

    def test_copy_file_overwrites_target(self):
        source = self.root / "a.txt"
        target = self.root / "sub" / "b.txt"
        source.write_text("new", encoding="utf-8")
        target.parent.mkdir()
        target.write_text("old", encoding="utf-8")
        result = _call("copy_file", params={"from": str(source), "to": str(target)})
        self.assertTrue(result.success)
        self.assertEqual(target.read_text(encoding="utf-8"), "new")

    def test_copy_missing_source_fails(self):
        result = _call("copy_file", params={"from": str(self.root / "none"), "to": str(self.root / "b")})
        self.assertFalse(result.success)
        self.assertFalse((self.root / "b").exists())

    def test_make_dir_creates_parents_with_mode(self):
        target = self.root / "a" / "b" / "c"
        result = _call("make_dir", params={"dir": str(target), "mode": 0o700})
        self.assertTrue(result.success)
        self.assertTrue(target.is_dir())
        if os.name != "nt":
            self.assertEqual(stat.S_IMODE(target.stat().st_mode), 0o700)
        # 已存在视为成功
        self.assertTrue(_call("make_dir", args=[str(target)]).success)

    @unittest.skipIf(os.name == "nt", "依赖 POSIX 权限位")
    def test_make_dir_explicit_mode_ignores_umask(self):
        target = self.root / "shared"
        old_umask = os.umask(0o022)
        try:
            result = _call("make_dir", params={"dir": str(target), "mode": 0o777})
        finally:
            os.umask(old_umask)
        self.assertTrue(result.success)
        self.assertEqual(stat.S_IMODE(target.stat().st_mode), 0o777)

    @unittest.skipIf(os.name == "nt", "依赖 POSIX 权限位")
    def test_make_dir_default_mode_follows_umask_and_keeps_existing(self):
        target = self.root / "plain"
        old_umask = os.umask(0o022)
        try:
            result = _call("make_dir", args=[str(target)])
            os.chmod(target, 0o700)
            again = _call("make_dir", params={"dir": str(target), "mode": 0o777})
        finally:
            os.umask(old_umask)
        self.assertTrue(result.success)
        self.assertTrue(again.success)
        # 已存在的目录不改权限
        self.assertEqual(stat.S_IMODE(target.stat().st_mode), 0o700)

    def test_make_dir_oversized_mode_is_not_fatal(self):
        result = _call("make_dir", params={"dir": str(self.root / "big"), "mode": 2**64})
        self.assertFalse(result.success)

    def test_paths_with_nul_byte_are_not_fatal(self):
        read = _call("read_file", args=[str(self.root / "bad\x00name")])
        self.assertFalse(read.success)
        self.assertEqual(read.payload, {"content": None})

        write = _call("write_file", params={"filename": str(self.root / "x\x00y" / "z"), "content": "a"})
        self.assertFalse(write.success)

        mkdir = _call("make_dir", args=[str(self.root / "d\x00ir")])
        self.assertFalse(mkdir.success)
        self.assertEqual(os.listdir(self.root), [])

    def test_mirror_dir_copies_tree(self):
        source = self.root / "src"
        (source / "inner").mkdir(parents=True)
        (source / "top.txt").write_text("top", encoding="utf-8")
        (source / "inner" / "deep.txt").write_text("deep", encoding="utf-8")
        target = self.root / "dst"
        target.mkdir()
        (target / "existing.txt").write_text("keep", encoding="utf-8")

        result = _call("mirror_dir", params={"from": str(source), "to": str(target)})
        self.assertTrue(result.success)
        self.assertEqual((target / "top.txt").read_text(encoding="utf-8"), "top")
        self.assertEqual((target / "inner" / "deep.txt").read_text(encoding="utf-8"), "deep")
        self.assertTrue((target / "existing.txt").exists())

    def test_mirror_missing_source_fails(self):
        result = _call("mirror_dir", params={"from": str(self.root / "none"), "to": str(self.root / "dst")})
        self.assertFalse(result.success)

    def test_remove_files_dirs_and_missing_paths(self):
        file_path = self.root / "f.txt"
        file_path.write_text("x", encoding="utf-8")
        dir_path = self.root / "d"
        (dir_path / "inner").mkdir(parents=True)
        (dir_path / "inner" / "g.txt").write_text("y", encoding="utf-8")

        result = _call("remove", args=[str(file_path), str(dir_path), str(self.root / "missing")])
        self.assertTrue(result.success)
        self.assertFalse(file_path.exists())
        self.assertFalse(dir_path.exists())

    @unittest.skipIf(os.name == "nt", "符号链接需要额外权限")
    def test_remove_symlink_keeps_target(self):
        target = self.root / "target_dir"
        target.mkdir()
        link = self.root / "link"
        link.symlink_to(target, target_is_directory=True)
        result = _call("remove", args=[str(link)])
        self.assertTrue(result.success)
        self.assertFalse(os.path.lexists(link))
        self.assertTrue(target.is_dir())


if __name__ == "__main__":
    unittest.main()
