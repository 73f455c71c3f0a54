"""External service integrations."""

from .anthropic import AnthropicClient
from .assets import AssetResolver
from .download import download_file
from .elevenlabs import ElevenLabsClient, SpeechResult, decode_error_body
from .pexels import PexelsClient, VideoSearchResult, select_video_file

__all__ = [
    "AnthropicClient",
    "AssetResolver",
    "download_file",
    "ElevenLabsClient",
    "SpeechResult",
    "decode_error_body",
    "PexelsClient",
    "VideoSearchResult",
    "select_video_file",
]
