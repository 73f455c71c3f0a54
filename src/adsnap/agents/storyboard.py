"""Storyboard agent: prompt to parsed storyboard."""

import logging

from ..errors import ParseFailure
from ..models import StoryboardDocument
from .base import BaseAgent
from .parser import parse_storyboard

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a creative director who creates short, compelling video ad storyboards.
Your output MUST be a Markdown list. Each scene must start with '**Scene [number]:**'.
Each scene MUST contain separate lines for '**Visual:**', '**Audio:**', and '**On-Screen Text:**'.
- The 'Visual' description should be concise and descriptive, perfect for searching a stock video library (e.g., "A smiling woman jogging in a sunny park").
- The 'Audio' is the voiceover script for that scene.
- The 'On-Screen Text' is any text that should be overlaid on the video. If there is no text, write 'None'.
- Do NOT use Markdown tables or any other format.
- Do NOT include any introductory or concluding sentences outside of the storyboard structure.
- Start with a '## Title:' line for the ad's title."""


class StoryboardAgent(BaseAgent[str, StoryboardDocument]):
    """Agent that turns an ad request into a storyboard."""

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "StoryboardAgent"

    @property
    def system_prompt(self) -> str:
        """Return the storyboard format instruction."""
        return SYSTEM_PROMPT

    def build_prompt(self, request: str) -> str:
        """Build the user prompt for one ad request."""
        return f"Create a video ad storyboard based on the following request: {request}"

    def generate_text(self, request: str) -> str:
        """Request raw storyboard text within the deadline.

        Raises:
            UpstreamTimeout: If the call does not finish in time.
            UpstreamError: If the text generation service fails.
        """
        return self._create_message(self.build_prompt(request))

    def run(self, input_data: str) -> StoryboardDocument:
        """Generate and parse a storyboard.

        Args:
            input_data: The user's ad request.

        Returns:
            Parsed StoryboardDocument.

        Raises:
            UpstreamTimeout: If generation exceeded the deadline.
            UpstreamError: If generation failed.
            ParseFailure: If no scene could be parsed from the text.
        """
        self._logger.info("Generating storyboard...")
        text = self.generate_text(input_data)
        self._logger.info("Received storyboard text")

        try:
            return parse_storyboard(text)
        except ParseFailure:
            self._logger.error(f"Failed to parse storyboard. Raw AI response was:\n{text}")
            raise
