"""
Tests for file reference resolution and data file locations.
"""

from pathlib import Path, PurePosixPath

import pytest

from cflagsdb.paths import CflagsPaths, get_paths, glob_escape, normalize_dir, resolve_path


class TestResolvePath:

    def test_relative_reference_joins_base(self):
        assert resolve_path("/project", "sub/x.c") == "/project/sub/x.c"

    def test_absolute_reference_unchanged(self):
        assert resolve_path("/project", "/other/y.c") == "/other/y.c"

    def test_absolute_reference_ignores_bad_base(self):
        assert resolve_path("", "/other/y.c") == "/other/y.c"

    def test_normalizes_dots(self):
        assert resolve_path("/project/src", "./../lib//z.c") == "/project/lib/z.c"
        assert resolve_path("/project", "/a/./b/../c.c") == "/a/c.c"

    def test_accepts_path_objects(self):
        assert resolve_path(Path("/project"), PurePosixPath("x.c")) == "/project/x.c"

    @pytest.mark.parametrize("ref", ["", None, 42, "bad\x00.c"])
    def test_malformed_reference(self, ref):
        assert resolve_path("/project", ref) is None

    def test_relative_reference_needs_absolute_base(self):
        assert resolve_path("project", "x.c") is None
        assert resolve_path(None, "x.c") is None

    def test_does_not_touch_filesystem(self, tmp_path):
        missing = tmp_path / "nowhere"
        assert resolve_path(str(missing), "ghost.c") == str(missing / "ghost.c")
        assert not missing.exists()


def test_normalize_dir(monkeypatch, tmp_path):
    assert normalize_dir("/a/b/../c/") == "/a/c"
    monkeypatch.chdir(tmp_path)
    assert normalize_dir("sub") == str(tmp_path / "sub")
    assert normalize_dir("") is None


def test_glob_escape():
    assert glob_escape("/plain/dir") == "/plain/dir"
    assert glob_escape("/we*ird?/[x]") == "/we[*]ird[?]/[[]x]"


def test_data_paths(tmp_path):
    paths = CflagsPaths(tmp_path)
    assert paths.flags_db == tmp_path / ".cflagsdb" / "cflags.db"
    assert paths.local_config == tmp_path / ".cflagsdb" / "config.json"

    paths.ensure_dirs()
    assert paths.logs_dir.is_dir()


def test_get_paths_with_root(tmp_path):
    assert get_paths(tmp_path).project_root == tmp_path
