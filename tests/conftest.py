"""Shared test fixtures for adsnap tests."""

import subprocess

import pytest
import imageio_ffmpeg

from adsnap.config import Config

FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


LIST_STORYBOARD = """## Title: Fresh Brew Mornings

**Scene 1:**
**Visual:** Steam rising from a fresh cup of coffee
**Audio:** Every great day starts with a single sip.
**On-Screen Text:** "Fresh Brew"

**Scene 2:**
**Visual:** A barista pouring latte art in a sunny cafe
**Audio:** Crafted by people who care.
**On-Screen Text:** None

**Scene 3:**
**Visual:** Friends laughing around a cafe table
**Audio:** Fresh Brew. Wake up to something better.
**On-Screen Text:** Order today
"""

TABLE_STORYBOARD = """## Title: Fresh Brew Mornings

| Scene | Visual | Audio | On-Screen Text |
|-------|--------|-------|----------------|
| 7 | Steam rising from a fresh cup of coffee | Every great day starts with a single sip. | "Fresh Brew" |
| 9 | A barista pouring latte art in a sunny cafe | Crafted by people who care. | None |
| 11 | Friends laughing around a cafe table | Fresh Brew. Wake up to something better. | Order today |
"""


@pytest.fixture
def list_storyboard():
    return LIST_STORYBOARD


@pytest.fixture
def table_storyboard():
    return TABLE_STORYBOARD


@pytest.fixture
def settings(tmp_path):
    """Config with dummy keys and all paths under tmp_path."""
    return Config(
        anthropic_api_key="test-anthropic",
        pexels_api_key="test-pexels",
        elevenlabs_api_key="test-elevenlabs",
        workspace=tmp_path / "work",
        public_dir=tmp_path / "public",
        ffmpeg_binary=FFMPEG,
        storyboard_timeout=5,
    )


@pytest.fixture
def ffmpeg_exe():
    return FFMPEG


@pytest.fixture
def source_video(tmp_path):
    """Create a 2-second test video (320x240, 10fps) with audio using ffmpeg."""
    out = tmp_path / "source.mp4"
    subprocess.run(
        [
            FFMPEG, "-y",
            "-f", "lavfi", "-i", "color=c=blue:s=320x240:d=2:r=10",
            "-f", "lavfi", "-i", "anullsrc=r=44100:cl=mono",
            "-shortest",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            "-c:a", "aac", "-b:a", "32k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


@pytest.fixture
def narration_audio(tmp_path):
    """Create a 0.5-second tone to stand in for synthesized narration."""
    out = tmp_path / "narration.m4a"
    subprocess.run(
        [
            FFMPEG, "-y",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=0.5",
            "-c:a", "aac", "-b:a", "64k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out
