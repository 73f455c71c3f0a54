"""Tests for the stock footage and narration clients and the asset resolver."""

from unittest.mock import MagicMock

import httpx
import pytest
import requests
from elevenlabs.core import ApiError

from adsnap.models import SceneScript
from adsnap.services import (
    AssetResolver,
    ElevenLabsClient,
    PexelsClient,
    SpeechResult,
    VideoSearchResult,
    decode_error_body,
    select_video_file,
)


def _pexels_payload(*video_files):
    return {"videos": [{"id": 42, "video_files": list(video_files)}]}


class TestSelectVideoFile:
    def test_prefers_full_hd(self):
        files = [
            {"quality": "sd", "width": 640, "link": "sd"},
            {"quality": "hd", "width": 1280, "link": "hd720"},
            {"quality": "hd", "width": 1920, "link": "hd1080"},
        ]
        assert select_video_file(files)["link"] == "hd1080"

    def test_falls_back_to_any_hd(self):
        files = [
            {"quality": "sd", "width": 640, "link": "sd"},
            {"quality": "hd", "width": 1280, "link": "hd720"},
        ]
        assert select_video_file(files)["link"] == "hd720"

    def test_falls_back_to_first(self):
        files = [
            {"quality": "sd", "width": 640, "link": "first"},
            {"quality": "sd", "width": 960, "link": "second"},
        ]
        assert select_video_file(files)["link"] == "first"

    def test_empty(self):
        assert select_video_file([]) is None


class TestPexelsClient:
    def test_find_video(self):
        session = MagicMock()
        session.get.return_value.json.return_value = _pexels_payload(
            {"quality": "hd", "width": 1920, "height": 1080, "link": "https://cdn/v.mp4"}
        )
        client = PexelsClient(api_key="key", session=session)

        result = client.find_video("coffee steam")

        assert result.found
        assert result.url == "https://cdn/v.mp4"
        assert result.metadata["video_id"] == 42
        _, kwargs = session.get.call_args
        assert kwargs["params"] == {"query": "coffee steam", "per_page": 1, "orientation": "landscape"}
        assert kwargs["headers"] == {"Authorization": "key"}

    def test_no_results(self):
        session = MagicMock()
        session.get.return_value.json.return_value = {"videos": []}
        result = PexelsClient(api_key="key", session=session).find_video("nothing")
        assert not result.found
        assert "No Pexels video found" in result.error_message

    def test_transport_error_reported(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("boom")
        result = PexelsClient(api_key="key", session=session).find_video("coffee")
        assert not result.found
        assert "boom" in result.error_message

    def test_http_error_reported(self):
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError("429")
        result = PexelsClient(api_key="key", session=session).find_video("coffee")
        assert not result.found
        assert "429" in result.error_message

    @pytest.mark.parametrize("payload", [
        {"videos": [{"video_files": [None]}]},
        {"videos": [None]},
        {"videos": "not-a-list"},
        ["unexpected"],
    ])
    def test_malformed_payload_reported(self, payload):
        session = MagicMock()
        session.get.return_value.json.return_value = payload
        result = PexelsClient(api_key="key", session=session).find_video("coffee")
        assert not result.found
        assert result.error_message

    def test_requires_key(self, monkeypatch):
        from adsnap.config import config

        monkeypatch.setattr(config, "pexels_api_key", "")
        with pytest.raises(ValueError):
            PexelsClient(api_key="")


class TestDecodeErrorBody:
    def test_parsed_json(self):
        assert decode_error_body({"detail": {"status": "quota_exceeded"}}) == (
            '{"detail": {"status": "quota_exceeded"}}'
        )

    def test_json_bytes(self):
        body = b'{"detail": {"status": "quota_exceeded"}}'
        assert decode_error_body(body) == '{"detail": {"status": "quota_exceeded"}}'

    def test_plain_text(self):
        assert decode_error_body(b"Bad Gateway\n") == "Bad Gateway"
        assert decode_error_body("Bad Gateway\n") == "Bad Gateway"

    def test_undecodable_bytes(self):
        assert decode_error_body(b"\xff\xfeoops") == "\ufffd\ufffdoops"

    def test_empty(self):
        assert decode_error_body(b"") == ""
        assert decode_error_body(None) == ""


class TestElevenLabsClient:
    def _client(self, **kwargs):
        sdk = MagicMock()
        client = ElevenLabsClient(api_key="key", client=sdk, **kwargs)
        return client, sdk.text_to_speech.convert

    def test_synthesize_writes_audio(self, tmp_path):
        client, convert = self._client(voice_id="voice", model_id="model")
        convert.return_value = iter([b"ID3", b"fake-mp3"])

        out = tmp_path / "scene_1_audio.mp3"
        result = client.synthesize("Hello there", out)

        assert result.local_path == out
        assert out.read_bytes() == b"ID3fake-mp3"
        kwargs = convert.call_args.kwargs
        assert kwargs["voice_id"] == "voice"
        assert kwargs["model_id"] == "model"
        assert kwargs["text"] == "Hello there"
        assert kwargs["voice_settings"] == {"stability": 0.5, "similarity_boost": 0.75}

    def test_api_error_body_decoded(self, tmp_path):
        client, convert = self._client()
        convert.side_effect = ApiError(status_code=401, body={"detail": {"status": "invalid_api_key"}})

        out = tmp_path / "scene_1_audio.mp3"
        result = client.synthesize("Hello", out)

        assert result.local_path is None
        assert result.error_message.startswith("401: ")
        assert "invalid_api_key" in result.error_message
        assert not out.exists()

    def test_error_while_streaming_removes_partial_file(self, tmp_path):
        client, convert = self._client()

        def stream():
            yield b"ID3"
            raise httpx.ReadError("connection reset")

        convert.return_value = stream()
        out = tmp_path / "scene_1_audio.mp3"
        result = client.synthesize("Hello", out)

        assert result.local_path is None
        assert "connection reset" in result.error_message
        assert not out.exists()

    def test_unexpected_sdk_error_reported(self, tmp_path):
        client, convert = self._client()

        def stream():
            yield b"ID3"
            raise RuntimeError("decoder exploded")

        convert.return_value = stream()
        out = tmp_path / "scene_1_audio.mp3"
        result = client.synthesize("Hello", out)

        assert result.local_path is None
        assert result.error_message == "decoder exploded"
        assert not out.exists()

    def test_requires_key(self, monkeypatch):
        from adsnap.config import config

        monkeypatch.setattr(config, "elevenlabs_api_key", "")
        with pytest.raises(ValueError):
            ElevenLabsClient(api_key="", client=MagicMock())


class TestAssetResolver:
    def _resolver(self):
        pexels = MagicMock()
        elevenlabs = MagicMock()
        return AssetResolver(pexels=pexels, elevenlabs=elevenlabs), pexels, elevenlabs

    def test_empty_inputs_skip_calls(self, tmp_path):
        resolver, pexels, elevenlabs = self._resolver()
        assets = resolver.resolve(SceneScript(scene_number=1), 0, tmp_path)
        assert assets.video_source_url is None
        assert assets.narration_audio_path is None
        pexels.find_video.assert_not_called()
        elevenlabs.synthesize.assert_not_called()

    def test_unexpected_client_errors_resolve_to_none(self, tmp_path):
        session = MagicMock()
        session.get.return_value.json.return_value = {"videos": [{"video_files": [None]}]}
        sdk = MagicMock()
        sdk.text_to_speech.convert.side_effect = RuntimeError("boom")
        resolver = AssetResolver(
            pexels=PexelsClient(api_key="key", session=session),
            elevenlabs=ElevenLabsClient(api_key="key", client=sdk),
        )

        scene = SceneScript(scene_number=1, visual_description="q", voiceover_script="Hi")
        assets = resolver.resolve(scene, 0, tmp_path)

        assert assets.video_source_url is None
        assert assets.narration_audio_path is None

    def test_failures_resolve_to_none(self, tmp_path):
        resolver, pexels, elevenlabs = self._resolver()
        pexels.find_video.return_value = VideoSearchResult(query="q", error_message="none found")
        elevenlabs.synthesize.return_value = SpeechResult(text="t", error_message="401: denied")

        scene = SceneScript(scene_number=1, visual_description="q", voiceover_script="t")
        assets = resolver.resolve(scene, 0, tmp_path)

        assert not assets.is_renderable
        assert assets.narration_audio_path is None

    def test_narration_named_by_position(self, tmp_path):
        resolver, pexels, elevenlabs = self._resolver()
        pexels.find_video.return_value = VideoSearchResult(query="q", url="https://cdn/v.mp4")
        elevenlabs.synthesize.side_effect = lambda text, path: SpeechResult(text=text, local_path=path)

        scene = SceneScript(scene_number=9, visual_description="q", voiceover_script="Hi")
        assets = resolver.resolve(scene, 1, tmp_path)

        assert assets.video_source_url == "https://cdn/v.mp4"
        assert assets.narration_audio_path == tmp_path / "scene_2_audio.mp3"

    def test_resolve_all_is_sequential_and_ordered(self, tmp_path):
        resolver, pexels, elevenlabs = self._resolver()
        calls = []

        def find_video(query):
            calls.append(("video", query))
            return VideoSearchResult(query=query, url=f"https://cdn/{query}.mp4")

        def synthesize(text, path):
            calls.append(("audio", text))
            return SpeechResult(text=text, local_path=path)

        pexels.find_video.side_effect = find_video
        elevenlabs.synthesize.side_effect = synthesize

        scenes = [
            SceneScript(scene_number=1, visual_description="a", voiceover_script="one"),
            SceneScript(scene_number=2, visual_description="b", voiceover_script="two"),
        ]
        assets = resolver.resolve_all(scenes, tmp_path)

        assert calls == [("video", "a"), ("audio", "one"), ("video", "b"), ("audio", "two")]
        assert [a.video_source_url for a in assets] == ["https://cdn/a.mp4", "https://cdn/b.mp4"]
