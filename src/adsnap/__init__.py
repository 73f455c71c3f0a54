"""adsnap: prompt-to-video ad generator."""

__version__ = "0.1.0"
