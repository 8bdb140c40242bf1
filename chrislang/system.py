"""Process execution and whole-file I/O helpers of the runtime."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


def run_command(command: Optional[str]) -> int:
    """Run ``command`` through the shell and return its exit status; -1 if missing."""
    if command is None:
        return -1
    try:
        completed = subprocess.run(command, shell=True, check=False)
    except OSError:
        return -1
    code = completed.returncode
    # A negative return code means death by signal; report the signal number.
    return -code if code < 0 else code


def command_output(command: Optional[str]) -> str:
    """Run ``command`` through the shell and return what it wrote to stdout."""
    if command is None:
        return ""
    try:
        completed = subprocess.run(
            command, shell=True, check=False, stdout=subprocess.PIPE
        )
    except OSError:
        return ""
    return completed.stdout.decode("utf-8", errors="replace")


def read_file(path: Optional[PathLike]) -> str:
    """Whole contents of ``path``, or an empty string if it cannot be read."""
    if path is None:
        return ""
    try:
        return Path(path).read_bytes().decode("utf-8", errors="replace")
    except OSError:
        return ""


def _write(path: Optional[PathLike], content: Optional[str], mode: str) -> bool:
    if path is None or content is None:
        return False
    try:
        with open(path, mode) as handle:
            handle.write(content.encode("utf-8"))
    except OSError:
        return False
    return True


def write_file(path: Optional[PathLike], content: Optional[str]) -> bool:
    """Replace the contents of ``path``; return whether it succeeded."""
    return _write(path, content, "wb")


def append_file(path: Optional[PathLike], content: Optional[str]) -> bool:
    """Append to ``path``, creating it if needed; return whether it succeeded."""
    return _write(path, content, "ab")


def file_exists(path: Optional[PathLike]) -> bool:
    """Whether ``path`` can be opened for reading."""
    if path is None:
        return False
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False