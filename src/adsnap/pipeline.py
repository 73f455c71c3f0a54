"""Prompt-to-video pipeline orchestration.

A run moves through these states:

    initialized -> storyboard_ready -> assets_resolved -> scenes_rendered
        -> concatenated -> published

Any fatal error moves it to ``failed``; both end states are followed by
``cleaned_up`` once the workspace has been removed.

Everything inside a run is sequential: every scene's assets are resolved,
one scene at a time, before any scene is rendered. The stock footage and
speech services enforce per-minute quotas, so calls to them are never
issued concurrently. Separate runs are independent and may overlap.
"""

import logging
import math
import shutil
import time
import uuid
from pathlib import Path
from typing import Any, Optional

from .agents import StoryboardAgent
from .config import Config, config
from .editor import Concatenator, SceneRenderer, build_subtitle
from .errors import NoRenderableScenes, PipelineError
from .models import AdResult, PipelineRun, RunState
from .services import AnthropicClient, AssetResolver, ElevenLabsClient, PexelsClient

logger = logging.getLogger(__name__)

VIDEO_URL_PREFIX = "/videos"


def unique_suffix() -> str:
    """Time-derived identifier that stays unique across concurrent runs."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def clamp_duration(
    value: Any,
    default: Optional[float] = None,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> float:
    """Clamp a requested ad duration.

    Args:
        value: Requested seconds; numbers and numeric strings are accepted.
        default: Used when value is missing or not numeric.
        minimum: Lower bound.
        maximum: Upper bound.

    Returns:
        Duration in seconds within [minimum, maximum].
    """
    default = config.default_duration if default is None else default
    minimum = config.min_duration if minimum is None else minimum
    maximum = config.max_duration if maximum is None else maximum

    if value is None or isinstance(value, bool):
        seconds = default
    else:
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            seconds = default
        if math.isnan(seconds):
            seconds = default

    return min(max(seconds, minimum), maximum)


class Workspace:
    """Ephemeral per-run directory.

    Entering the context does not create the directory; ``create()`` does.
    Leaving the context always removes it. Removal failures are logged and
    never raised.
    """

    PREFIX = "temp_assets_"

    def __init__(self, root: Path) -> None:
        self.path = root / f"{self.PREFIX}{unique_suffix()}"

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def create(self) -> Path:
        """Create the directory and return its path."""
        self.path.mkdir(parents=True, exist_ok=False)
        logger.debug(f"Created workspace {self.path}")
        return self.path

    def cleanup(self) -> None:
        """Remove the directory and everything in it."""
        if not self.exists:
            return
        logger.info(f"Cleaning up temp directory: {self.path}")
        try:
            shutil.rmtree(self.path)
        except OSError as e:
            logger.error(f"Error cleaning up temp directory {self.path}: {e}")

    def __enter__(self) -> "Workspace":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.cleanup()
        return False


class PipelineOrchestrator:
    """Drives one prompt through storyboard, assets, rendering and publishing.

    Collaborators are injected; build_orchestrator builds one of each.
    """

    def __init__(
        self,
        storyboard_agent: StoryboardAgent,
        asset_resolver: AssetResolver,
        renderer: SceneRenderer,
        concatenator: Concatenator,
        settings: Optional[Config] = None,
    ) -> None:
        self._storyboard_agent = storyboard_agent
        self._asset_resolver = asset_resolver
        self._renderer = renderer
        self._concatenator = concatenator
        self._settings = settings or config

    @property
    def videos_dir(self) -> Path:
        return self._settings.videos_dir

    def new_run(self, prompt: str, duration_seconds: Any = None) -> PipelineRun:
        """Create a run for a prompt with its duration clamped."""
        return PipelineRun(
            run_id=unique_suffix(),
            prompt=prompt,
            duration_seconds=clamp_duration(
                duration_seconds,
                default=self._settings.default_duration,
                minimum=self._settings.min_duration,
                maximum=self._settings.max_duration,
            ),
        )

    def generate_ad(self, prompt: str, duration_seconds: Any = None) -> AdResult:
        """Generate and publish an ad for a prompt.

        Args:
            prompt: The ad request.
            duration_seconds: Requested total length; clamped, default 15.

        Returns:
            AdResult with the storyboard title and the published video URL.

        Raises:
            PipelineError: On any fatal pipeline condition.
        """
        return self.execute(self.new_run(prompt, duration_seconds))

    def execute(self, run: PipelineRun) -> AdResult:
        """Execute a run to completion; the workspace is removed on every path."""
        try:
            with Workspace(self._settings.workspace) as workspace:
                try:
                    logger.info(f"[1/5] Generating storyboard for run {run.run_id}...")
                    self.generate_storyboard(run)

                    run.workspace = workspace.create()
                    logger.info("[2/5] Fetching scene assets sequentially...")
                    self.resolve_assets(run)

                    logger.info("[3/5] Rendering scenes...")
                    self.render_scenes(run)

                    logger.info("[4/5] Concatenating final video...")
                    final_path = self.concatenate(run)

                    result = self.publish(run, final_path)
                    logger.info(f"[5/5] Published {result.video_url}")
                    return result

                except Exception as e:
                    logger.error(f"Run {run.run_id} failed: {e}")
                    run.fail(str(e))
                    raise
        finally:
            run.advance(RunState.CLEANED_UP)

    def generate_storyboard(self, run: PipelineRun) -> PipelineRun:
        """Generate and parse the storyboard."""
        run.storyboard = self._storyboard_agent.run(run.prompt)
        run.advance(RunState.STORYBOARD_READY)
        logger.info(f"Storyboard parsed successfully with {len(run.storyboard.scenes)} scenes")
        return run

    def resolve_assets(self, run: PipelineRun) -> PipelineRun:
        """Resolve every scene's assets, in storyboard order."""
        run.assets = self._asset_resolver.resolve_all(run.storyboard.scenes, run.workspace)
        run.advance(RunState.ASSETS_RESOLVED)
        return run

    def render_scenes(self, run: PipelineRun) -> PipelineRun:
        """Render every renderable scene, in storyboard order.

        Scenes without a video are dropped. A render failure ends the run.

        Raises:
            NoRenderableScenes: If no scene had a video.
            RenderFailure: If a scene fails to render.
        """
        duration = run.scene_duration
        run.rendered = []

        for index, (scene, assets) in enumerate(zip(run.storyboard.scenes, run.assets)):
            position = index + 1
            if not assets.is_renderable:
                logger.warning(f"Skipping Scene {position} due to missing video.")
                continue

            subtitle_path = build_subtitle(
                scene.on_screen_text, duration, position, run.workspace
            )
            rendered = self._renderer.render(
                video_url=assets.video_source_url,
                duration=duration,
                output_path=run.workspace / f"scene_{position}.mp4",
                scene_number=scene.scene_number,
                narration_path=assets.narration_audio_path,
                subtitle_path=subtitle_path,
            )
            run.rendered.append(rendered)

        if not run.rendered:
            raise NoRenderableScenes("No scenes could be processed to create a final video.")

        run.advance(RunState.SCENES_RENDERED)
        logger.info(f"Rendered {len(run.rendered)} of {len(run.storyboard.scenes)} scenes")
        return run

    def concatenate(self, run: PipelineRun) -> Path:
        """Join the rendered clips inside the workspace."""
        output_path = run.workspace / f"ad_{unique_suffix()}.mp4"
        self._concatenator.concat([scene.clip_path for scene in run.rendered], output_path)
        run.advance(RunState.CONCATENATED)
        return output_path

    def publish(self, run: PipelineRun, final_path: Path) -> AdResult:
        """Move the final video out of the workspace into the served directory."""
        try:
            self.videos_dir.mkdir(parents=True, exist_ok=True)
            destination = self.videos_dir / final_path.name
            shutil.move(str(final_path), str(destination))
        except OSError as e:
            raise PipelineError(f"Could not publish final video: {e}") from e

        run.final_path = destination
        run.advance(RunState.PUBLISHED)
        return AdResult(
            title=run.storyboard.title,
            video_url=f"{VIDEO_URL_PREFIX}/{destination.name}",
        )


def build_orchestrator(settings: Optional[Config] = None) -> PipelineOrchestrator:
    """Build an orchestrator with one client per external service.

    Raises:
        ValueError: If an API key is missing.
    """
    settings = settings or config
    settings.validate_required()

    text_client = AnthropicClient(
        api_key=settings.anthropic_api_key,
        model=settings.default_model,
        timeout=settings.storyboard_timeout,
    )
    resolver = AssetResolver(
        pexels=PexelsClient(api_key=settings.pexels_api_key),
        elevenlabs=ElevenLabsClient(
            api_key=settings.elevenlabs_api_key,
            voice_id=settings.elevenlabs_voice_id,
            model_id=settings.elevenlabs_model_id,
        ),
    )
    return PipelineOrchestrator(
        storyboard_agent=StoryboardAgent(text_client, timeout=settings.storyboard_timeout),
        asset_resolver=resolver,
        renderer=SceneRenderer(ffmpeg_binary=settings.ffmpeg_binary),
        concatenator=Concatenator(ffmpeg_binary=settings.ffmpeg_binary),
        settings=settings,
    )
