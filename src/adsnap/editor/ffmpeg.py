"""Thin ffmpeg subprocess runner."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from ..config import config

logger = logging.getLogger(__name__)

STDERR_TAIL_LINES = 5


def stderr_tail(stderr: str, lines: int = STDERR_TAIL_LINES) -> str:
    """Last non-empty lines of ffmpeg's stderr, where it reports the failure."""
    tail = [line.strip() for line in (stderr or "").splitlines() if line.strip()]
    return " | ".join(tail[-lines:])


class FFmpegError(Exception):
    """ffmpeg could not be started or exited with a non-zero code."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def run_ffmpeg(
    args: List[str],
    cwd: Optional[Path] = None,
    binary: Optional[str] = None,
) -> None:
    """Run ffmpeg with the given arguments.

    Args:
        args: Arguments after the executable name.
        cwd: Working directory; relative paths in args resolve against it.
        binary: ffmpeg executable. Defaults to config.ffmpeg_binary.

    Raises:
        FFmpegError: If ffmpeg cannot be started or exits non-zero. The
            captured stderr is attached.
    """
    cmd = [binary or config.ffmpeg_binary, *args]
    logger.debug(f"Spawning FFmpeg in {cwd} with args: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.error(f"Failed to start FFmpeg process: {e}")
        raise FFmpegError(f"Failed to start FFmpeg: {e}") from e

    if result.returncode != 0:
        logger.error(f"FFmpeg stderr:\n{result.stderr}")
        message = f"FFmpeg exited with code {result.returncode}"
        tail = stderr_tail(result.stderr)
        if tail:
            message = f"{message}: {tail}"
        raise FFmpegError(
            message,
            returncode=result.returncode,
            stderr=result.stderr,
        )

    logger.debug("FFmpeg process completed successfully")
