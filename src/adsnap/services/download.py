"""Streaming file download."""

import logging
from pathlib import Path
from typing import Optional

import requests

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_file(
    url: str,
    output_path: Path,
    session: Optional[requests.Session] = None,
) -> Path:
    """Download a URL to a local file.

    Args:
        url: Source URL.
        output_path: Destination file.
        session: Optional requests session.

    Returns:
        The destination path.

    Raises:
        ValueError: If url is empty.
        requests.RequestException: On transport errors or non-2xx responses.
    """
    if not url:
        raise ValueError(f"Download failed: URL is empty for {output_path}")

    http = session or requests
    logger.info(f"Downloading from {url[:60]}...")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with http.get(url, stream=True) as response:
        response.raise_for_status()
        with open(output_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)

    logger.debug(f"Download finished: {output_path.name}")
    return output_path
