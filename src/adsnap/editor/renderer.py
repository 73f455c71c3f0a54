"""Per-scene rendering to normalized clips."""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import requests

from ..errors import RenderFailure
from ..models import RenderedScene
from ..services.download import download_file
from .ffmpeg import FFmpegError, run_ffmpeg

logger = logging.getLogger(__name__)

WIDTH = 1920
HEIGHT = 1080
AUDIO_SAMPLE_RATE = 44100

# Shared by every clip so the concatenation can stream-copy.
VIDEO_CODEC_ARGS = ["-c:v", "libx264", "-preset", "fast", "-crf", "23"]
AUDIO_CODEC_ARGS = ["-c:a", "aac", "-b:a", "192k"]


def build_video_filter(duration: float, subtitle_name: Optional[str] = None) -> str:
    """Video chain: trim, fit inside the canvas, pad and centre, burn subtitles."""
    chain = (
        f"[0:v]trim=duration={duration},"
        f"scale={WIDTH}:{HEIGHT}:force_original_aspect_ratio=decrease,"
        f"pad={WIDTH}:{HEIGHT}:(ow-iw)/2:(oh-ih)/2,setsar=1"
    )
    if subtitle_name:
        chain += f",ass='{subtitle_name}'"
    return chain + "[vout]"


def build_audio_filter(duration: float, has_narration: bool) -> str:
    """Audio chain: narration padded/trimmed to the duration, else silence."""
    if has_narration:
        return f"[1:a]apad,atrim=0:{duration}[aout]"
    return f"anullsrc=r={AUDIO_SAMPLE_RATE}:cl=stereo,atrim=0:{duration}[aout]"


def build_render_args(
    video_name: str,
    output_name: str,
    duration: float,
    audio_name: Optional[str] = None,
    subtitle_name: Optional[str] = None,
) -> List[str]:
    """Build the ffmpeg arguments for one scene.

    File names are relative to the workspace, which is ffmpeg's working
    directory, so the subtitle path needs no filter escaping.
    """
    inputs = ["-i", video_name]
    if audio_name:
        inputs.extend(["-i", audio_name])

    filter_complex = ";".join([
        build_video_filter(duration, subtitle_name),
        build_audio_filter(duration, audio_name is not None),
    ])

    return [
        *inputs,
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        *VIDEO_CODEC_ARGS,
        *AUDIO_CODEC_ARGS,
        "-shortest",
        "-y", output_name,
    ]


class SceneRenderer:
    """Renders one scene's raw video, narration and subtitle into a clip.

    Every clip gets an audio track (narration or silence) so the clips can
    be concatenated without re-encoding.
    """

    def __init__(
        self,
        ffmpeg_binary: Optional[str] = None,
        downloader: Callable[[str, Path], Path] = download_file,
    ) -> None:
        """Initialize the renderer.

        Args:
            ffmpeg_binary: ffmpeg executable. Defaults to config.ffmpeg_binary.
            downloader: Callable fetching a URL into a local path.
        """
        self._ffmpeg_binary = ffmpeg_binary
        self._download = downloader

    def render(
        self,
        video_url: str,
        duration: float,
        output_path: Path,
        scene_number: int,
        narration_path: Optional[Path] = None,
        subtitle_path: Optional[Path] = None,
    ) -> RenderedScene:
        """Render a scene clip.

        Args:
            video_url: Stock footage URL.
            duration: Allotted scene duration in seconds.
            output_path: Clip path; its directory is the working directory
                and must hold the narration and subtitle files. The raw
                download is saved beside it as ``<stem>_raw.mp4``.
            scene_number: Storyboard scene number, reported in the result
                and in errors.
            narration_path: Optional narration audio file.
            subtitle_path: Optional ASS subtitle file.

        Returns:
            RenderedScene for the written clip.

        Raises:
            RenderFailure: If the download or ffmpeg fails.
        """
        workdir = output_path.parent
        raw_path = workdir / f"{output_path.stem}_raw.mp4"

        try:
            self._download(video_url, raw_path)
        except (requests.RequestException, ValueError, OSError) as e:
            raise RenderFailure(
                f"Could not download video for scene {scene_number}: {e}",
                scene_number=scene_number,
            ) from e

        args = build_render_args(
            video_name=raw_path.name,
            output_name=output_path.name,
            duration=duration,
            audio_name=narration_path.name if narration_path else None,
            subtitle_name=subtitle_path.name if subtitle_path else None,
        )

        try:
            run_ffmpeg(args, cwd=workdir, binary=self._ffmpeg_binary)
        except FFmpegError as e:
            raise RenderFailure(
                f"Rendering scene {scene_number} failed: {e}",
                scene_number=scene_number,
                returncode=e.returncode,
                stderr=e.stderr,
            ) from e

        logger.info(f"Rendered scene {scene_number}: {output_path.name}")
        return RenderedScene(
            scene_number=scene_number,
            clip_path=output_path,
            duration_seconds=duration,
        )
