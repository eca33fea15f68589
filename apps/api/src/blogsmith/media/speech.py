"""Speech transcriber - Google Cloud Speech-to-Text."""

import logging
from typing import Any

from google.api_core.exceptions import GoogleAPIError
from google.cloud import speech
from google.oauth2 import service_account

logger = logging.getLogger(__name__)


class RecognitionError(Exception):
    """Speech recognition failed."""


class SpeechTranscriber:
    """
    Transcribe mono LINEAR16 audio.

    The client is created on first use so the service can start
    without speech credentials.
    """

    def __init__(
        self,
        credentials_info: dict[str, Any] | None = None,
        language_code: str = "en-US",
        sample_rate_hz: int = 16000,
        model: str = "video",
        use_enhanced: bool = True,
        client: Any = None,
    ):
        self.credentials_info = credentials_info
        self.language_code = language_code
        self.sample_rate_hz = sample_rate_hz
        self.model = model
        self.use_enhanced = use_enhanced
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.credentials_info or not self.credentials_info.get("private_key"):
                raise RecognitionError("Speech credentials not configured")
            try:
                credentials = service_account.Credentials.from_service_account_info(
                    self.credentials_info
                )
            except ValueError as e:
                raise RecognitionError(f"Invalid speech credentials: {e}")
            self._client = speech.SpeechAsyncClient(credentials=credentials)
        return self._client

    def build_config(self) -> speech.RecognitionConfig:
        return speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate_hz,
            language_code=self.language_code,
            enable_automatic_punctuation=True,
            model=self.model,
            use_enhanced=self.use_enhanced,
        )

    async def transcribe(self, audio_bytes: bytes) -> str:
        """
        Transcribe audio and join the segments with newlines.

        Raises:
            RecognitionError: credentials missing or the API call failed
        """
        client = self._get_client()
        audio = speech.RecognitionAudio(content=audio_bytes)

        try:
            response = await client.recognize(config=self.build_config(), audio=audio)
        except GoogleAPIError as e:
            raise RecognitionError(f"Speech recognition failed: {e}")

        segments = [
            result.alternatives[0].transcript
            for result in response.results
            if result.alternatives
        ]
        logger.info(f"Recognized {len(segments)} transcript segments")
        return "\n".join(segments)
