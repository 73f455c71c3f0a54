"""Configuration management."""

import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CORS_ORIGINS = [
    "http://localhost:8080",
    "http://127.0.0.1:8080",
    "http://localhost:8081",
    "http://127.0.0.1:8081",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _env_list(name: str, default: List[str]) -> List[str]:
    """Read a comma-separated list from the environment."""
    value = os.getenv(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (storyboard generation)"
    )
    pexels_api_key: str = Field(
        default_factory=lambda: os.getenv("PEXELS_API_KEY", ""),
        description="Pexels API key (stock footage search)"
    )
    elevenlabs_api_key: str = Field(
        default_factory=lambda: os.getenv("ELEVENLABS_API_KEY", ""),
        description="ElevenLabs API key (narration)"
    )

    # Paths
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("ADSNAP_WORKSPACE", ".")),
        description="Directory under which per-run workspaces are created"
    )
    public_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("ADSNAP_PUBLIC_DIR", "public")),
        description="Statically served root; videos are published to <public_dir>/videos"
    )

    # Model settings
    default_model: str = Field(
        default_factory=lambda: os.getenv("ADSNAP_MODEL", "claude-sonnet-4-20250514"),
        description="Claude model used for storyboards"
    )
    storyboard_timeout: float = Field(
        default_factory=lambda: float(os.getenv("ADSNAP_STORYBOARD_TIMEOUT", "30")),
        description="Deadline for the storyboard generation call in seconds",
        gt=0
    )

    # Duration limits
    default_duration: float = Field(default=15.0, description="Ad length when none is requested")
    min_duration: float = Field(default=1.0, description="Shortest allowed ad length")
    max_duration: float = Field(default=60.0, description="Longest allowed ad length")

    # Narration
    elevenlabs_voice_id: str = Field(
        default_factory=lambda: os.getenv("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM"),
        description="ElevenLabs voice"
    )
    elevenlabs_model_id: str = Field(
        default_factory=lambda: os.getenv("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1"),
        description="ElevenLabs speech model"
    )

    # Rendering
    ffmpeg_binary: str = Field(
        default_factory=lambda: os.getenv("FFMPEG_BINARY", "ffmpeg"),
        description="ffmpeg executable"
    )

    # Server
    host: str = Field(
        default_factory=lambda: os.getenv("HOST", "0.0.0.0"),
        description="HTTP bind address"
    )
    port: int = Field(
        default_factory=lambda: int(os.getenv("PORT", "5001")),
        description="HTTP port"
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: _env_list("ADSNAP_CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        description="Origins allowed to call the API"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def videos_dir(self) -> Path:
        """Directory the final videos are published into."""
        return self.public_dir / "videos"

    def validate_required(self) -> None:
        """Validate that every external service credential is set.

        Raises:
            ValueError: If any API key is missing.
        """
        missing: list[str] = []

        if not self.anthropic_api_key:
            missing.append("ANTHROPIC_API_KEY")
        if not self.pexels_api_key:
            missing.append("PEXELS_API_KEY")
        if not self.elevenlabs_api_key:
            missing.append("ELEVENLABS_API_KEY")

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )


# Global config instance
config = Config()
