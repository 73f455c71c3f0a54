"""Video editing and assembly module."""

from .compositor import (
    Concatenator,
    VideoInfo,
    build_concat_args,
    get_video_info,
    write_concat_manifest,
)
from .ffmpeg import FFmpegError, run_ffmpeg, stderr_tail
from .renderer import (
    SceneRenderer,
    build_audio_filter,
    build_render_args,
    build_video_filter,
)
from .subtitles import (
    SubtitleStyle,
    build_subtitle,
    escape_text,
    format_timestamp,
    has_overlay_text,
    render_subtitle,
)

__all__ = [
    # Compositor
    "Concatenator",
    "VideoInfo",
    "build_concat_args",
    "get_video_info",
    "write_concat_manifest",
    # FFmpeg
    "FFmpegError",
    "run_ffmpeg",
    "stderr_tail",
    # Renderer
    "SceneRenderer",
    "build_audio_filter",
    "build_render_args",
    "build_video_filter",
    # Subtitles
    "SubtitleStyle",
    "build_subtitle",
    "escape_text",
    "format_timestamp",
    "has_overlay_text",
    "render_subtitle",
]
