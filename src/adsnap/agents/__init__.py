"""AI agents for storyboard generation and parsing."""

from .base import BaseAgent
from .parser import parse_storyboard
from .storyboard import StoryboardAgent

__all__ = ["BaseAgent", "StoryboardAgent", "parse_storyboard"]
