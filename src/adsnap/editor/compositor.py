"""Video compositor for joining rendered scene clips."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from moviepy import VideoFileClip

from ..errors import ConcatFailure
from .ffmpeg import FFmpegError, run_ffmpeg

logger = logging.getLogger(__name__)

MANIFEST_NAME = "filelist.txt"


@dataclass
class VideoInfo:
    """Basic properties of a video file."""

    duration: float
    width: int
    height: int


def write_concat_manifest(clip_paths: List[Path], manifest_path: Path) -> Path:
    """Write an ffmpeg concat-demuxer file list.

    Clips are listed by name relative to the manifest's directory, in order.

    Args:
        clip_paths: Clips in playback order.
        manifest_path: Where to write the list.

    Returns:
        The manifest path.
    """
    lines = []
    for clip_path in clip_paths:
        name = clip_path.name.replace("'", "'\\''")
        lines.append(f"file '{name}'")
    manifest_path.write_text("\n".join(lines), encoding="utf-8")
    return manifest_path


def build_concat_args(manifest_name: str, output_name: str) -> List[str]:
    """ffmpeg arguments for a stream-copy concatenation."""
    return ["-f", "concat", "-safe", "0", "-i", manifest_name, "-c", "copy", "-y", output_name]


class Concatenator:
    """Joins normalized clips into one video without re-encoding."""

    def __init__(self, ffmpeg_binary: Optional[str] = None) -> None:
        self._ffmpeg_binary = ffmpeg_binary

    def concat(self, clip_paths: List[Path], output_path: Path) -> Path:
        """Concatenate clips into output_path.

        The clips must live in output_path's directory and share encoding
        settings, as the SceneRenderer produces them.

        Args:
            clip_paths: Clips in playback order.
            output_path: Final video path.

        Returns:
            Path to the concatenated video.

        Raises:
            ConcatFailure: If no clips are given or ffmpeg fails.
        """
        if not clip_paths:
            raise ConcatFailure("No clips provided")

        workdir = output_path.parent
        manifest_path = write_concat_manifest(clip_paths, workdir / MANIFEST_NAME)
        logger.info(f"Concatenating {len(clip_paths)} clips into {output_path.name}")

        try:
            run_ffmpeg(
                build_concat_args(manifest_path.name, output_path.name),
                cwd=workdir,
                binary=self._ffmpeg_binary,
            )
        except FFmpegError as e:
            raise ConcatFailure(
                f"Concatenating clips failed: {e}",
                returncode=e.returncode,
                stderr=e.stderr,
            ) from e

        return output_path


def get_video_info(video_path: Path) -> VideoInfo:
    """Read duration and resolution of a video file.

    Args:
        video_path: Path to the video.

    Returns:
        VideoInfo for the file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    if not video_path.exists():
        raise FileNotFoundError(f"Video not found: {video_path}")

    clip = VideoFileClip(str(video_path))
    try:
        return VideoInfo(duration=clip.duration, width=clip.w, height=clip.h)
    finally:
        clip.close()
