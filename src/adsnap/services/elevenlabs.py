"""ElevenLabs text-to-speech client."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import httpx
from elevenlabs import ElevenLabs
from elevenlabs.core import ApiError

from ..config import config

logger = logging.getLogger(__name__)


@dataclass
class SpeechResult:
    """Result of a speech synthesis request."""

    text: str
    local_path: Optional[Path] = None
    error_message: Optional[str] = None
    metadata: dict = field(default_factory=dict)


def decode_error_body(body: Any) -> str:
    """Best-effort rendering of an error response body.

    Audio requests can fail with a JSON body, a text body or raw bytes,
    depending on where the failure happened.

    Args:
        body: Parsed JSON, text or raw bytes.

    Returns:
        Compact JSON text when the body is JSON, otherwise the body as text
        with undecodable bytes replaced.
    """
    if body is None or body == b"" or body == "":
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    text = str(body)
    try:
        return json.dumps(json.loads(text))
    except ValueError:
        return text.strip()


class ElevenLabsClient:
    """Client wrapper for the ElevenLabs text-to-speech API."""

    DEFAULT_STABILITY = 0.5
    DEFAULT_SIMILARITY_BOOST = 0.75
    OUTPUT_FORMAT = "mp3_44100_128"

    def __init__(
        self,
        api_key: Optional[str] = None,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        client: Optional[ElevenLabs] = None,
    ) -> None:
        """Initialize the ElevenLabs client.

        Args:
            api_key: ElevenLabs API key. Defaults to ELEVENLABS_API_KEY env var.
            voice_id: Voice to synthesize with. Defaults to config.elevenlabs_voice_id.
            model_id: Speech model. Defaults to config.elevenlabs_model_id.
            client: Optional SDK client, built from api_key if not provided.
        """
        self._api_key = api_key or config.elevenlabs_api_key
        if not self._api_key:
            raise ValueError(
                "ElevenLabs API key not provided. Set ELEVENLABS_API_KEY env var."
            )
        self._voice_id = voice_id or config.elevenlabs_voice_id
        self._model_id = model_id or config.elevenlabs_model_id
        self._client = client or ElevenLabs(api_key=self._api_key)

    @property
    def voice_id(self) -> str:
        return self._voice_id

    def synthesize(self, text: str, output_path: Path) -> SpeechResult:
        """Synthesize speech and save it as an mp3 file.

        Never raises for service failures; they are reported in the result.
        A partially written file is removed.

        Args:
            text: Text to speak.
            output_path: Where to write the audio bytes.

        Returns:
            SpeechResult with the written path or an error message.
        """
        result = SpeechResult(
            text=text,
            metadata={"voice_id": self._voice_id, "model_id": self._model_id},
        )

        try:
            audio = self._client.text_to_speech.convert(
                voice_id=self._voice_id,
                text=text,
                model_id=self._model_id,
                output_format=self.OUTPUT_FORMAT,
                voice_settings={
                    "stability": self.DEFAULT_STABILITY,
                    "similarity_boost": self.DEFAULT_SIMILARITY_BOOST,
                },
            )
            output_path.parent.mkdir(parents=True, exist_ok=True)
            # The SDK streams: the request is only sent once iteration starts.
            with open(output_path, "wb") as f:
                for chunk in audio:
                    f.write(chunk)

        except ApiError as e:
            output_path.unlink(missing_ok=True)
            result.error_message = f"{e.status_code}: {decode_error_body(e.body)[:500]}"
            return result

        except httpx.HTTPError as e:
            output_path.unlink(missing_ok=True)
            result.error_message = str(e)
            return result

        except OSError as e:
            output_path.unlink(missing_ok=True)
            result.error_message = f"Could not save audio: {e}"
            return result

        except Exception as e:
            logger.error(f"Unexpected speech synthesis error: {e}")
            output_path.unlink(missing_ok=True)
            result.error_message = str(e)
            return result

        result.local_path = output_path
        return result
