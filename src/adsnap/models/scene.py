"""Scene data model."""

from pydantic import BaseModel, Field


class SceneScript(BaseModel):
    """Represents a single scene of the storyboard."""

    scene_number: int = Field(..., description="1-indexed scene number", ge=1)
    visual_description: str = Field(default="", description="Stock footage search query")
    voiceover_script: str = Field(default="", description="Narration text, may be empty")
    on_screen_text: str = Field(default="", description="Overlay text; '' or 'none' for no overlay")

    class Config:
        """Pydantic config."""
        frozen = False
