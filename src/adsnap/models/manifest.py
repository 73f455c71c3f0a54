"""Storyboard document model."""

from typing import List
from pathlib import Path
from pydantic import BaseModel, Field
import yaml

from .scene import SceneScript

DEFAULT_TITLE = "Untitled Video Ad"


class StoryboardDocument(BaseModel):
    """Title plus ordered scenes parsed from generated text."""

    title: str = Field(default=DEFAULT_TITLE, description="Ad title")
    scenes: List[SceneScript] = Field(default_factory=list, description="Scenes in screen order")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_yaml(cls, path: Path) -> "StoryboardDocument":
        """Load storyboard from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save storyboard to YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)
