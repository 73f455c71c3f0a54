"""Pipeline run state model."""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from .manifest import StoryboardDocument

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Pipeline run state enum."""
    INITIALIZED = "initialized"
    STORYBOARD_READY = "storyboard_ready"
    ASSETS_RESOLVED = "assets_resolved"
    SCENES_RENDERED = "scenes_rendered"
    CONCATENATED = "concatenated"
    PUBLISHED = "published"
    FAILED = "failed"
    CLEANED_UP = "cleaned_up"


TERMINAL_STATES = (RunState.PUBLISHED, RunState.FAILED)


class SceneAssets(BaseModel):
    """Assets resolved for one scene."""

    video_source_url: Optional[str] = Field(None, description="Stock footage download URL")
    narration_audio_path: Optional[Path] = Field(None, description="Narration file in the workspace")

    @property
    def is_renderable(self) -> bool:
        """A scene is renderable once it has a video."""
        return bool(self.video_source_url)


class RenderedScene(BaseModel):
    """A normalized clip inside the workspace."""

    scene_number: int = Field(..., description="Storyboard scene number", ge=1)
    clip_path: Path = Field(..., description="Rendered clip path")
    duration_seconds: float = Field(..., description="Allotted clip duration", gt=0)


class AdResult(BaseModel):
    """Published ad returned to callers."""

    title: str
    video_url: str


class PipelineRun(BaseModel):
    """State of one prompt-to-video run."""

    run_id: str = Field(..., description="Unique run identifier")
    prompt: str = Field(..., description="User prompt")
    duration_seconds: float = Field(..., description="Clamped total ad duration", gt=0)
    workspace: Optional[Path] = Field(None, description="Ephemeral workspace directory")
    storyboard: Optional[StoryboardDocument] = Field(None, description="Parsed storyboard")
    assets: List[SceneAssets] = Field(default_factory=list, description="Assets per scene, storyboard order")
    rendered: List[RenderedScene] = Field(default_factory=list, description="Rendered clips, storyboard order")
    final_path: Optional[Path] = Field(None, description="Published video path")
    state: RunState = Field(default=RunState.INITIALIZED, description="Current state")
    history: List[RunState] = Field(
        default_factory=lambda: [RunState.INITIALIZED], description="States visited, in order"
    )
    errors: List[str] = Field(default_factory=list, description="Error messages")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def scene_duration(self) -> float:
        """Uniform per-scene duration."""
        if not self.storyboard or not self.storyboard.scenes:
            raise ValueError("Run has no parsed scenes")
        return self.duration_seconds / len(self.storyboard.scenes)

    def advance(self, state: RunState) -> None:
        """Move the run to a new state."""
        logger.debug(f"Run {self.run_id}: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def outcome(self) -> Optional[RunState]:
        """The terminal state reached (published or failed), if any."""
        for state in reversed(self.history):
            if state in TERMINAL_STATES:
                return state
        return None

    def fail(self, message: str) -> None:
        """Record an error and move to the failed state."""
        self.errors.append(message)
        self.advance(RunState.FAILED)
