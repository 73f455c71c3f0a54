"""Pipeline error types.

Every fatal condition of a pipeline run is a PipelineError subclass carrying a
human-readable message. Recoverable asset failures are not exceptions: the
service clients report them through result objects instead.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for errors that end a pipeline run."""


class UpstreamError(PipelineError):
    """The text generation service failed."""


class UpstreamTimeout(UpstreamError):
    """Storyboard generation exceeded its deadline."""


class ParseFailure(PipelineError):
    """No scene could be extracted from the generated storyboard text."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class NoRenderableScenes(PipelineError):
    """Every scene lacked a stock video."""


class RenderFailure(PipelineError):
    """Rendering a single scene failed."""

    def __init__(
        self,
        message: str,
        scene_number: Optional[int] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.scene_number = scene_number
        self.returncode = returncode
        self.stderr = stderr


class ConcatFailure(PipelineError):
    """Joining the rendered clips failed."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
