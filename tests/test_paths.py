"""
test_paths.py - Tests for local path derivation and its fallbacks.
"""

import os
import pytest

from realm_sync_config import (
    LocalPathPlan,
    PathStrategy,
    derive_path_plan,
    ensure_directory,
    normalize_locator,
    resolve_locator,
    sanitize_file_name,
)
from realm_sync_config.errors import (
    DirectoryCreationError,
    FileNameTooLongError,
    MissingIdentityError,
    PathTooLongError,
    ValidationError,
)
from realm_sync_config.paths import byte_length, hash_file_name, server_path
from realm_sync_config.utils.hashing import NAME_HASH_LENGTH, md5_hex


def resolved_for(origin, raw, identity="user42"):
    return resolve_locator(normalize_locator(raw, origin), identity)


class TestServerPath:
    """The server path is the remote path minus the file name."""

    def test_nested_path(self, origin):
        assert server_path(resolved_for(origin, "/a/b/c")) == "a/b"

    def test_single_segment(self, origin):
        assert server_path(resolved_for(origin, "/c")) == "c"

    def test_placeholder_path(self, origin):
        assert server_path(resolved_for(origin, "/~/default")) == "user42"


class TestFullPlan:
    """Paths that fit use <root>/<identity>/<server path>/<name>."""

    def test_default_plan(self, origin, temp_dir):
        plan = derive_path_plan(resolved_for(origin, "/~/default"), temp_dir, "user42")

        assert plan.directory == os.path.join(temp_dir, "user42", "user42")
        assert plan.file_name == "default"
        assert plan.full_path == os.path.join(temp_dir, "user42", "user42", "default")
        assert plan.strategy is PathStrategy.FULL
        assert os.path.isdir(plan.directory)

    def test_file_name_override(self, origin, temp_dir):
        plan = derive_path_plan(resolved_for(origin, "/~/default"), temp_dir, "user42", "mine")
        assert plan.file_name == "mine"

    def test_relative_root_is_made_absolute(self, origin, recorder):
        plan = derive_path_plan(
            resolved_for(origin, "/~/default"), "relative", "user42", ensure_dir=recorder
        )
        assert os.path.isabs(plan.directory)
        assert recorder.calls == [plan.directory]


class TestFallbacks:
    """Over-long paths hash the name, then drop the server path."""

    def test_hashed_name(self, origin, temp_dir):
        long_name = "x" * 250
        resolved = resolved_for(origin, "/~/default")
        plan = derive_path_plan(resolved, temp_dir, "user42", long_name)

        assert plan.strategy is PathStrategy.HASHED_NAME
        assert plan.file_name == md5_hex(long_name)
        assert len(plan.file_name) == NAME_HASH_LENGTH
        assert plan.directory == os.path.join(temp_dir, "user42", "user42")
        assert byte_length(plan.full_path) <= 256

    def test_short_directory(self, origin, temp_dir):
        segment = "s" * 60
        raw = f"/~/{segment}/{segment}/{segment}/{segment}/default"
        plan = derive_path_plan(resolved_for(origin, raw), temp_dir, "user42")

        assert plan.strategy is PathStrategy.SHORT_DIRECTORY
        assert plan.directory == os.path.join(temp_dir, "user42")
        assert plan.file_name == hash_file_name("default")
        assert byte_length(plan.full_path) <= 256

    def test_length_is_measured_in_bytes(self, origin, temp_dir):
        name = "é" * 120
        resolved = resolved_for(origin, "/~/default")
        unhashed = os.path.join(temp_dir, "user42", "user42", name)
        assert len(unhashed) <= 256 < byte_length(unhashed)

        plan = derive_path_plan(resolved, temp_dir, "user42", name)
        assert plan.strategy is PathStrategy.HASHED_NAME

    def test_long_root_falls_back_to_identity_directory(self, origin, recorder):
        root = "/" + "r" * 179
        identity = "i" * 40
        resolved = resolved_for(origin, "/~/default", identity)
        plan = derive_path_plan(resolved, root, identity, ensure_dir=recorder)

        assert plan.strategy is PathStrategy.SHORT_DIRECTORY
        assert plan.full_path == f"{root}/{identity}/{hash_file_name('default')}"
        assert len(plan.full_path) == 254

    def test_exhausted_fallbacks(self, origin, recorder):
        root = "/" + "r" * 199
        identity = "i" * 40
        resolved = resolved_for(origin, "/~/default", identity)

        with pytest.raises(PathTooLongError) as exc_info:
            derive_path_plan(resolved, root, identity, ensure_dir=recorder)

        error = exc_info.value
        assert error.limit == 256
        assert error.full_path == f"{root}/{identity}/{hash_file_name('default')}"
        assert error.length == 274
        assert recorder.calls == []

    def test_file_name_budget(self, origin, recorder):
        resolved = resolved_for(origin, "/~/default")
        with pytest.raises(FileNameTooLongError) as exc_info:
            derive_path_plan(
                resolved, "/data", "user42", "a_rather_long_name",
                ensure_dir=recorder, max_file_name=10,
            )
        assert exc_info.value.limit == 10
        assert exc_info.value.file_name == "a_rather_long_name"


class TestSanitization:
    """Forbidden characters are replaced 1:1 with '_'."""

    def test_forbidden_characters(self):
        assert sanitize_file_name('a<b>c:d"e/f\\g|h?i*j') == "a_b_c_d_e_f_g_h_i_j"

    @pytest.mark.parametrize("name", ["plain", "a:b", "<<>>", 'x"y*z?'])
    def test_idempotent(self, name):
        once = sanitize_file_name(name)
        assert sanitize_file_name(once) == once
        assert len(once) == len(name)

    def test_override_is_sanitized(self, origin, recorder):
        plan = derive_path_plan(
            resolved_for(origin, "/~/default"), "/data", "user42", "my:file?", ensure_dir=recorder
        )
        assert plan.file_name == "my_file_"

    def test_hash_uses_unsanitized_name(self, origin, temp_dir):
        name = "a:" * 130
        plan = derive_path_plan(resolved_for(origin, "/~/default"), temp_dir, "user42", name)
        assert plan.file_name == md5_hex(name)


class TestIdentity:
    """The identity is the first directory level."""

    @pytest.mark.parametrize("identity", [None, ""])
    def test_missing_identity(self, origin, recorder, identity):
        resolved = resolved_for(origin, "/shared/default")
        with pytest.raises(MissingIdentityError):
            derive_path_plan(resolved, "/data", identity, ensure_dir=recorder)

    @pytest.mark.parametrize("identity", ["..", "/abs", "a/../b", "a/b", "~", "a b"])
    def test_unusable_identity(self, origin, recorder, identity):
        resolved = resolved_for(origin, "/shared/default")
        with pytest.raises(ValidationError):
            derive_path_plan(resolved, "/data", identity, ensure_dir=recorder)


class TestDirectoryCreation:
    """Directories are created idempotently."""

    def test_existing_directory_is_success(self, temp_dir):
        target = os.path.join(temp_dir, "a", "b")
        ensure_directory(target)
        ensure_directory(target)
        assert os.path.isdir(target)

    def test_path_is_a_file(self, temp_dir):
        target = os.path.join(temp_dir, "file")
        with open(target, "w") as f:
            f.write("x")
        with pytest.raises(DirectoryCreationError) as exc_info:
            ensure_directory(target)
        assert exc_info.value.directory == target

    def test_parent_is_a_file(self, origin, temp_dir):
        root = os.path.join(temp_dir, "file")
        with open(root, "w") as f:
            f.write("x")
        with pytest.raises(DirectoryCreationError):
            derive_path_plan(resolved_for(origin, "/~/default"), root, "user42")


class TestLocalPathPlan:
    def test_full_path(self):
        plan = LocalPathPlan(directory="/data/user42", file_name="default")
        assert plan.full_path == "/data/user42" + os.sep + "default"
        assert plan.strategy is PathStrategy.FULL


class TestDistinctLocations:
    """Different identity and URL pairs never share a directory layout."""

    def test_identity_is_one_directory_level(self, origin, recorder):
        plan = derive_path_plan(
            resolved_for(origin, "/b/x/x", "a"), "/data", "a", ensure_dir=recorder
        )
        assert plan.directory == os.path.join("/data", "a", "b", "x")
