"""Tests for running hook scripts."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest

from scouty.errors import HookError
from scouty.hooks import HOOK_NEW_SESSION, Hook


def write_script(path: Path, body: str) -> str:
    path.write_text(f"#!/bin/sh\n{body}\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


class TestTryRun:
    """Tests for `Hook.try_run`."""

    @pytest.mark.asyncio
    async def test_missing_script_is_skipped(self, tmp_path: Path) -> None:
        hook = await Hook.try_run(HOOK_NEW_SESSION, str(tmp_path / "absent.sh"), ["a"])
        assert not hook.filename_exists
        assert not hook.failed
        assert hook.stdout == []

    @pytest.mark.asyncio
    async def test_empty_path_is_skipped(self) -> None:
        hook = await Hook.try_run(HOOK_NEW_SESSION, "", [])
        assert not hook.filename_exists

    @pytest.mark.asyncio
    async def test_arguments_and_stdout(self, tmp_path: Path) -> None:
        script = write_script(tmp_path / "hook.sh", 'echo "first $1"\necho "!second $2"')
        hook = await Hook.try_run(HOOK_NEW_SESSION, script, ["stash", "true"])

        assert hook.filename_exists
        assert hook.stdout == ["first stash", "!second true"]
        assert hook.highlights == ["second true"]

    @pytest.mark.asyncio
    async def test_long_stdout_line(self, tmp_path: Path) -> None:
        script = write_script(
            tmp_path / "long.sh", "head -c 100000 /dev/zero | tr '\\0' x\necho\necho '!done'"
        )
        hook = await Hook.try_run(HOOK_NEW_SESSION, script, [])

        assert len(hook.stdout[0]) == 100_000
        assert hook.highlights == ["done"]

    @pytest.mark.asyncio
    async def test_non_zero_exit_raises(self, tmp_path: Path) -> None:
        script = write_script(tmp_path / "fail.sh", "echo boom >&2\nexit 3")
        with pytest.raises(HookError) as exc_info:
            await Hook.try_run(HOOK_NEW_SESSION, script, [])

        assert exc_info.value.name == HOOK_NEW_SESSION
        assert exc_info.value.filename == script
        assert "boom" in exc_info.value.stderr

    @pytest.mark.asyncio
    async def test_not_executable_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "plain.sh"
        path.write_text("#!/bin/sh\necho hi\n")
        path.chmod(0o644)
        with pytest.raises(HookError):
            await Hook.try_run(HOOK_NEW_SESSION, str(path), [])


class TestExists:
    """Tests for `Hook.exists`."""

    def test_present(self, tmp_path: Path) -> None:
        script = write_script(tmp_path / "hook.sh", "true")
        assert Hook.exists(HOOK_NEW_SESSION, script)

    def test_absent(self, tmp_path: Path) -> None:
        assert not Hook.exists(HOOK_NEW_SESSION, str(tmp_path / "nope.sh"))

    def test_directory_is_not_a_script(self, tmp_path: Path) -> None:
        assert not Hook.exists(HOOK_NEW_SESSION, str(tmp_path))


class TestHighlights:
    """Tests for report highlights."""

    def test_only_marked_lines(self) -> None:
        hook = Hook(name="x", filename="x", stdout=["plain", "!marked", " !indented"])
        assert hook.highlights == ["marked"]
