"""Data models for the ad generator."""

from .scene import SceneScript
from .manifest import StoryboardDocument, DEFAULT_TITLE
from .project import (
    AdResult,
    PipelineRun,
    RenderedScene,
    RunState,
    SceneAssets,
)

__all__ = [
    "SceneScript",
    "StoryboardDocument",
    "DEFAULT_TITLE",
    "AdResult",
    "PipelineRun",
    "RenderedScene",
    "RunState",
    "SceneAssets",
]
