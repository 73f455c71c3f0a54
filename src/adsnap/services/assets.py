"""Per-scene asset resolution: stock footage plus narration."""

import logging
from pathlib import Path
from typing import List, Optional

from ..models import SceneAssets, SceneScript
from .elevenlabs import ElevenLabsClient
from .pexels import PexelsClient

logger = logging.getLogger(__name__)


class AssetResolver:
    """Resolves the video and narration of each scene.

    A missing asset is an expected outcome: failures are logged and resolve
    to None, never raised. Calls are made one at a time, in storyboard order,
    to stay under the services' per-minute quotas.
    """

    def __init__(self, pexels: PexelsClient, elevenlabs: ElevenLabsClient) -> None:
        self._pexels = pexels
        self._elevenlabs = elevenlabs

    def resolve_video(self, visual_description: str) -> Optional[str]:
        """Return a stock video URL for the description, or None."""
        query = (visual_description or "").strip()
        if not query:
            return None

        result = self._pexels.find_video(query)
        if not result.found:
            logger.warning(result.error_message)
            return None
        return result.url

    def resolve_narration(
        self,
        voiceover_script: str,
        scene_index: int,
        workspace: Path,
    ) -> Optional[Path]:
        """Synthesize narration for a scene, or return None.

        Args:
            voiceover_script: Narration text.
            scene_index: 0-based position of the scene in the storyboard.
            workspace: Run workspace the audio file is written into.
        """
        text = (voiceover_script or "").strip()
        if not text:
            return None

        audio_path = workspace / f"scene_{scene_index + 1}_audio.mp3"
        result = self._elevenlabs.synthesize(text, audio_path)
        if result.local_path is None:
            logger.error(f"ElevenLabs API Error for scene {scene_index + 1}: {result.error_message}")
            return None

        logger.info(f"Generated voiceover for Scene {scene_index + 1}")
        return result.local_path

    def resolve(self, scene: SceneScript, scene_index: int, workspace: Path) -> SceneAssets:
        """Resolve both assets of one scene."""
        return SceneAssets(
            video_source_url=self.resolve_video(scene.visual_description),
            narration_audio_path=self.resolve_narration(
                scene.voiceover_script, scene_index, workspace
            ),
        )

    def resolve_all(self, scenes: List[SceneScript], workspace: Path) -> List[SceneAssets]:
        """Resolve every scene sequentially, in storyboard order."""
        assets: List[SceneAssets] = []
        for index, scene in enumerate(scenes):
            logger.info(f"Fetching assets for Scene {index + 1}...")
            assets.append(self.resolve(scene, index, workspace))
        return assets
