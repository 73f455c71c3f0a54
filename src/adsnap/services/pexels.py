"""Pexels stock video search client."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from ..config import config

logger = logging.getLogger(__name__)


@dataclass
class VideoSearchResult:
    """Result of a stock video search."""

    query: str
    url: Optional[str] = None
    error_message: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.url is not None


def select_video_file(video_files: List[dict]) -> Optional[dict]:
    """Pick the encoding to download from a Pexels video.

    Preference: HD at 1920 px wide, then any HD file, then the first file.

    Args:
        video_files: The ``video_files`` list of a Pexels video object.

    Returns:
        The chosen file dict, or None if the list is empty.
    """
    if not video_files:
        return None
    for candidate in video_files:
        if candidate.get("quality") == "hd" and candidate.get("width") == 1920:
            return candidate
    for candidate in video_files:
        if candidate.get("quality") == "hd":
            return candidate
    return video_files[0]


class PexelsClient:
    """Client wrapper for the Pexels video search API."""

    BASE_URL = "https://api.pexels.com"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = BASE_URL,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Pexels client.

        Args:
            api_key: Pexels API key. Defaults to PEXELS_API_KEY env var.
            base_url: API root.
            session: Optional requests session (shared connection pool).
        """
        self._api_key = api_key or config.pexels_api_key
        if not self._api_key:
            raise ValueError("Pexels API key not provided. Set PEXELS_API_KEY env var.")
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    def search_videos(
        self,
        query: str,
        per_page: int = 1,
        orientation: str = "landscape",
    ) -> List[dict]:
        """Search for stock videos.

        Args:
            query: Free-text search query.
            per_page: Number of results to request.
            orientation: Pexels orientation filter.

        Returns:
            The ``videos`` list of the response.

        Raises:
            requests.RequestException: On transport errors or non-2xx responses.
        """
        response = self._session.get(
            f"{self._base_url}/videos/search",
            params={"query": query, "per_page": per_page, "orientation": orientation},
            headers={"Authorization": self._api_key},
        )
        response.raise_for_status()
        return response.json().get("videos", [])

    def find_video(self, query: str) -> VideoSearchResult:
        """Find one landscape video for a query.

        Never raises; service failures and malformed responses are reported
        in the result.

        Args:
            query: Free-text search query.

        Returns:
            VideoSearchResult with the chosen file's link or an error message.
        """
        result = VideoSearchResult(query=query)

        try:
            logger.info(f"Searching Pexels for: \"{query}\"")
            videos = self.search_videos(query)

            if not videos:
                result.error_message = f"No Pexels video found for query: \"{query}\""
                return result

            video = videos[0]
            video_file = select_video_file(video.get("video_files") or [])
            if not video_file or not video_file.get("link"):
                result.error_message = f"Pexels video {video.get('id')} has no downloadable files"
                return result

            result.url = video_file["link"]
            result.metadata = {
                "video_id": video.get("id"),
                "quality": video_file.get("quality"),
                "width": video_file.get("width"),
                "height": video_file.get("height"),
            }
            return result

        except (requests.RequestException, ValueError) as e:
            result.error_message = f"Pexels API error: {e}"
            return result

        except Exception as e:
            logger.error(f"Unexpected Pexels response for \"{query}\": {e}")
            result.error_message = f"Unexpected Pexels response: {e}"
            return result
