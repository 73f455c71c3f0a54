"""Storyboard text parsing.

The text generator is asked for a labelled markdown list, but it does not
always comply. Two strategies are tried, chosen by structural detection:

  - table: any line holds a pipe and mentions panel/scene/visual. The first
    non-separator pipe row is the header; later rows become scenes numbered
    by their position.
  - list: "Scene N" / "Panel N" markers open scenes; "Visual:", "Audio:" and
    "On-Screen Text:" labelled lines fill them.

Both strategies feed the same clean-up pass (trim, strip one layer of
surrounding double quotes).
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ..errors import ParseFailure
from ..models import DEFAULT_TITLE, SceneScript, StoryboardDocument

logger = logging.getLogger(__name__)

TABLE_HINT = re.compile(r"panel|scene|visual", re.IGNORECASE)
SEPARATOR_CELL = re.compile(r"^:?-{3,}:?$")
# List, blockquote, heading and emphasis markers that may open a line.
_PREFIX = r"^(?:[\s*#_>-]|\d+[.)])*"

SCENE_MARKER = re.compile(_PREFIX + r"(?:scene|panel)\s*(\d+)\b", re.IGNORECASE)
QUOTED = re.compile(r'^"(.*)"$', re.DOTALL)

# Label regexes capture everything after the label. A label either opens the
# line after optional markers ("1. Visual:", "> **Visual:**", "- **Visual**:")
# or is bolded anywhere in the line ("Shot 1, **Visual:** ...").
_LABEL = r"(?:^(?:[\s*#_>-]|\d+[.)])*|\*\*)(?:{names})[*_]*\s*:[*_]*\s*(.*)$"
VISUAL_LABEL = re.compile(_LABEL.format(names="visual|description"), re.IGNORECASE)
AUDIO_LABEL = re.compile(_LABEL.format(names="audio|voiceover|voice-over"), re.IGNORECASE)
TEXT_LABEL = re.compile(_LABEL.format(names="on[- ]screen text|text overlay"), re.IGNORECASE)


@dataclass
class _SceneDraft:
    number: int
    visual: str = ""
    audio: str = ""
    text: str = ""


def parse_storyboard(text: str) -> StoryboardDocument:
    """Parse generated storyboard text into a document.

    Args:
        text: Raw text from the text generation service.

    Returns:
        StoryboardDocument with at least one scene.

    Raises:
        ParseFailure: If no scene could be extracted.
    """
    lines = [line for line in (text or "").splitlines() if line.strip()]
    title = extract_title(lines)

    if is_table(lines):
        logger.debug("Parsing storyboard as markdown table")
        drafts = _parse_table(lines)
    else:
        logger.debug("Parsing storyboard as formatted list")
        drafts = _parse_list(lines)

    if not drafts:
        raise ParseFailure(
            "Could not get a valid storyboard from the AI's response. "
            "It may have been in an unexpected format.",
            raw_text=text or "",
        )

    scenes = [
        SceneScript(
            scene_number=draft.number,
            visual_description=clean_field(draft.visual),
            voiceover_script=clean_field(draft.audio),
            on_screen_text=clean_field(draft.text),
        )
        for draft in drafts
    ]
    logger.info(f"Parsed storyboard '{title}' with {len(scenes)} scenes")
    return StoryboardDocument(title=title, scenes=scenes)


def extract_title(lines: List[str]) -> str:
    """Return the first heading line with its marker stripped."""
    for line in lines:
        stripped = line.strip()
        if stripped.startswith("#"):
            title = stripped.lstrip("#").strip()
            if title:
                return title
    return DEFAULT_TITLE


def clean_field(value: str) -> str:
    """Trim a field and strip one layer of surrounding double quotes."""
    value = value.strip()
    match = QUOTED.match(value)
    if match:
        return match.group(1)
    return value


def is_table(lines: List[str]) -> bool:
    """Detect the markdown table layout."""
    return any("|" in line and TABLE_HINT.search(line) for line in lines)


def split_cells(line: str) -> List[str]:
    """Split a pipe row into trimmed cells, ignoring the outer pipes."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return [cell.strip() for cell in row.split("|")]


def is_separator(cells: List[str]) -> bool:
    """A separator row holds only dash cells (with optional alignment colons)."""
    filled = [cell for cell in cells if cell]
    return bool(filled) and all(SEPARATOR_CELL.match(cell) for cell in filled)


def _find_column(header: List[str], *names: str, exclude: Optional[int] = None) -> Optional[int]:
    for index, cell in enumerate(header):
        if index == exclude:
            continue
        if any(name in cell for name in names):
            return index
    return None


def _cell(cells: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(cells):
        return ""
    return cells[index]


def _parse_table(lines: List[str]) -> List[_SceneDraft]:
    rows = [split_cells(line) for line in lines if "|" in line]
    rows = [cells for cells in rows if not is_separator(cells)]
    if not rows:
        return []

    header = [cell.lower() for cell in rows[0]]
    visual_col = _find_column(header, "visual", "description")
    if visual_col is None:
        logger.warning(f"Storyboard table has no visual column: {rows[0]}")
        return []
    audio_col = _find_column(header, "audio", "voiceover", exclude=visual_col)
    text_col = _find_column(header, "text", exclude=visual_col)
    min_cells = sum(1 for cell in header if cell)

    drafts: List[_SceneDraft] = []
    for cells in rows[1:]:
        if len(cells) < min_cells:
            logger.debug(f"Skipping short table row: {cells}")
            continue
        drafts.append(_SceneDraft(
            number=len(drafts) + 1,
            visual=_cell(cells, visual_col),
            audio=_cell(cells, audio_col),
            text=_cell(cells, text_col),
        ))
    return drafts


def _append(current: str, addition: str) -> str:
    return f"{current} {addition.strip()}"


def _parse_list(lines: List[str]) -> List[_SceneDraft]:
    drafts: List[_SceneDraft] = []
    current: Optional[_SceneDraft] = None

    for line in lines:
        stripped = line.strip()
        marker = SCENE_MARKER.match(stripped)
        if marker:
            if current:
                drafts.append(current)
            number = int(marker.group(1))
            # "Scene 0" is not a valid 1-indexed number; fall back to position.
            current = _SceneDraft(number=number if number >= 1 else len(drafts) + 1)
            continue
        if current is None:
            continue

        match = VISUAL_LABEL.search(stripped)
        if match:
            current.visual = _append(current.visual, match.group(1))
            continue
        match = AUDIO_LABEL.search(stripped)
        if match:
            current.audio = _append(current.audio, match.group(1))
            continue
        match = TEXT_LABEL.search(stripped)
        if match:
            current.text = _append(current.text, match.group(1))

    if current:
        drafts.append(current)
    return drafts
