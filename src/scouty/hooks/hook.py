"""
Hook scripts.

A hook is an operator-supplied executable run when a validator event
happens. It receives the event details as positional arguments. Lines it
prints are logged; lines starting with `!` are also surfaced in the chat
report.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Sequence

from scouty.errors import HookError

logger = logging.getLogger(__name__)

HIGHLIGHT_PREFIX: Final = "!"
"""Stdout lines starting with this are shown in reports."""


def _script_exists(filename: str) -> bool:
    return bool(filename) and Path(filename).is_file()


@dataclass(slots=True)
class Hook:
    """The outcome of one hook invocation."""

    name: str
    """Hook name, e.g. "New session"."""

    filename: str
    """Configured script path."""

    filename_exists: bool = False
    """Whether the script was found and run."""

    stdout: list[str] = field(default_factory=list)
    """Lines the script printed."""

    failed: bool = False
    """Whether the script exited with an error."""

    @property
    def highlights(self) -> list[str]:
        """Stdout lines marked for reports, without the marker."""
        return [
            line.removeprefix(HIGHLIGHT_PREFIX)
            for line in self.stdout
            if line.startswith(HIGHLIGHT_PREFIX)
        ]

    @classmethod
    async def try_run(cls, name: str, filename: str, args: Sequence[str]) -> Hook:
        """
        Run a hook script if it exists.

        Args:
            name: Hook name.
            filename: Script path. An empty or missing path skips the hook.
            args: Positional arguments for the script.

        Returns:
            The hook outcome. `filename_exists` is False when skipped.

        Raises:
            HookError: If the script cannot be started or exits non-zero.
        """
        if not _script_exists(filename):
            logger.warning("Hook script - %s - filename (%s) not defined", name, filename)
            return cls(name=name, filename=filename)

        logger.info("Run: %s %s", filename, " ".join(args))

        try:
            process = await asyncio.create_subprocess_exec(
                filename,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise HookError(name, filename, str(e)) from e

        out, err = await process.communicate()
        stdout = out.decode(errors="replace").splitlines()
        for line in stdout:
            logger.info("$ %s", line)

        if process.returncode != 0:
            raise HookError(name, filename, err.decode(errors="replace"))

        return cls(name=name, filename=filename, filename_exists=True, stdout=stdout)

    @staticmethod
    def exists(name: str, filename: str) -> bool:
        """Check a configured script is present, warning when it is not."""
        if not _script_exists(filename):
            logger.warning("Hook script - %s - filename (%s) not defined", name, filename)
            return False
        return True
