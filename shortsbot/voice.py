"""Narration audio via the ElevenLabs text-to-speech API."""

import os

import requests

from shortsbot.common import PipelineError, ensure_dir, mask_secret
from shortsbot.media import get_media_duration

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech"
OUTPUT_FORMAT = "mp3_44100_128"
VOICE_SETTINGS = {
    "stability": 0.5,
    "similarity_boost": 0.75,
}
AUDIO_NAME = "audio.mp3"


class ElevenLabsClient:
    """Generates narration audio and measures its duration."""

    def __init__(self, api_key, voice_id, model, temp_dir, session=None):
        self.api_key = api_key
        self.voice_id = voice_id
        self.model = model
        self.temp_dir = temp_dir
        self.session = session or requests

    @classmethod
    def from_config(cls, config):
        return cls(
            api_key=config.elevenlabs_api_key,
            voice_id=config.elevenlabs_voice_id,
            model=config.elevenlabs_model,
            temp_dir=config.temp_dir,
        )

    def generate_audio(self, text):
        """Synthesize *text* and save it as an MP3 in the temp directory.

        Returns:
            dict: {"path": str, "duration": float seconds}

        Raises:
            PipelineError: Missing API key or API failure.
        """
        if not self.api_key:
            raise PipelineError("ELEVENLABS_API_KEY is not set in environment variables")

        print(f"[ElevenLabs] API key: {mask_secret(self.api_key)}")
        print(f"[ElevenLabs] Voice: {self.voice_id}, model: {self.model}")
        print(f"[ElevenLabs] Generating audio ({len(text)} chars)...")

        url = f"{ELEVENLABS_TTS_URL}/{self.voice_id}"
        headers = {
            "xi-api-key": self.api_key,
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }
        payload = {
            "text": text,
            "model_id": self.model,
            "voice_settings": dict(VOICE_SETTINGS),
        }

        try:
            resp = self.session.post(url, headers=headers, json=payload,
                                     params={"output_format": OUTPUT_FORMAT},
                                     timeout=120)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            response = exc.response
            if response is None:
                raise PipelineError(f"ElevenLabs request failed: {exc}")
            raise PipelineError(
                f"ElevenLabs API error: {response.status_code} - "
                f"{_error_detail(response)}"
            )
        except requests.RequestException as exc:
            raise PipelineError(f"ElevenLabs request failed: {exc}")

        audio_path = os.path.join(ensure_dir(self.temp_dir), AUDIO_NAME)
        with open(audio_path, "wb") as f:
            f.write(resp.content)

        duration = get_media_duration(audio_path)
        print(f"[ElevenLabs] Audio saved: {audio_path} ({duration:.2f}s)")
        return {"path": audio_path, "duration": duration}


def _error_detail(response):
    """Best-effort error message from an ElevenLabs error response."""
    try:
        data = response.json()
    except ValueError:
        return response.reason
    if not isinstance(data, dict):
        return response.reason
    detail = data.get("detail")
    if isinstance(detail, dict) and detail.get("message"):
        return detail["message"]
    return detail or data.get("message") or response.reason
