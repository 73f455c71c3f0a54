"""ASS subtitle rendering for on-screen text."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CANVAS_WIDTH = 1920
CANVAS_HEIGHT = 1080
START_OFFSET = 0.1
END_MARGIN = 0.1


def _default_font() -> str:
    return "Arial" if sys.platform == "win32" else "DejaVu Sans"


@dataclass
class SubtitleStyle:
    """Configuration for the overlay text style."""

    font: str = ""
    font_size: int = 72
    primary_color: str = "&H00FFFFFF"
    secondary_color: str = "&H000000FF"
    outline_color: str = "&H00000000"
    # Alpha 0x99 gives the semi-transparent background box.
    back_color: str = "&H99000000"
    bold: bool = True
    border_style: int = 1
    outline: int = 2
    shadow: int = 2
    # Numpad layout: 2 is bottom centre.
    alignment: int = 2
    margin_v: int = 80

    def __post_init__(self) -> None:
        if not self.font:
            self.font = _default_font()

    def to_ass(self, name: str = "Default") -> str:
        """Render the ``Style:`` line."""
        bold = -1 if self.bold else 0
        return (
            f"Style: {name},{self.font},{self.font_size},{self.primary_color},"
            f"{self.secondary_color},{self.outline_color},{self.back_color},"
            f"{bold},0,0,0,100,100,0,0,{self.border_style},{self.outline},{self.shadow},"
            f"{self.alignment},10,10,{self.margin_v},1"
        )


DEFAULT_STYLE = SubtitleStyle()

STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
    "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
    "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding"
)
EVENT_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


def has_overlay_text(text: Optional[str]) -> bool:
    """Whether overlay text should produce a subtitle ('' and 'none' do not)."""
    stripped = (text or "").strip()
    return bool(stripped) and stripped.lower() != "none"


def format_timestamp(seconds: float) -> str:
    """Format seconds as an ASS timestamp (H:MM:SS.cc)."""
    centis = int(round(max(seconds, 0.0) * 100))
    hours, centis = divmod(centis, 360000)
    minutes, centis = divmod(centis, 6000)
    secs, centis = divmod(centis, 100)
    return f"{hours}:{minutes:02d}:{secs:02d}.{centis:02d}"


def escape_text(text: str) -> str:
    """Escape ASS markup characters (backslash and braces)."""
    return text.replace("\\", "\\\\").replace("{", "\\{").replace("}", "\\}")


def render_subtitle(
    text: str,
    duration: float,
    style: Optional[SubtitleStyle] = None,
) -> str:
    """Build the ASS document for one scene's overlay.

    Args:
        text: Overlay text.
        duration: Scene duration in seconds.
        style: SubtitleStyle. Uses the default if None.

    Returns:
        ASS file contents.
    """
    style = style or DEFAULT_STYLE
    start = START_OFFSET
    end = max(duration - END_MARGIN, start)

    lines = [
        "[Script Info]",
        "ScriptType: v4.00+",
        f"PlayResX: {CANVAS_WIDTH}",
        f"PlayResY: {CANVAS_HEIGHT}",
        "",
        "[V4+ Styles]",
        STYLE_FORMAT,
        style.to_ass(),
        "",
        "[Events]",
        EVENT_FORMAT,
        f"Dialogue: 0,{format_timestamp(start)},{format_timestamp(end)},Default,,0,0,0,,"
        f"{{\\an{style.alignment}}}{escape_text(text.strip())}",
    ]
    return "\n".join(lines)


def build_subtitle(
    text: Optional[str],
    duration: float,
    scene_number: int,
    output_dir: Path,
    style: Optional[SubtitleStyle] = None,
) -> Optional[Path]:
    """Write the subtitle file for a scene, if it has overlay text.

    Args:
        text: The scene's on-screen text.
        duration: Scene duration in seconds.
        scene_number: Scene number, used in the file name.
        output_dir: Directory to write ``scene_<n>.ass`` into.
        style: Optional style override.

    Returns:
        Path to the subtitle file, or None when there is no overlay.
    """
    if not has_overlay_text(text):
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    ass_path = output_dir / f"scene_{scene_number}.ass"
    ass_path.write_text(render_subtitle(text, duration, style), encoding="utf-8")
    logger.info(f"Created ASS subtitle file: {ass_path.name}")
    return ass_path
