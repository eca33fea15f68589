"""Transcription service - video in, transcript out."""

import asyncio
import logging
from pathlib import Path

from blogsmith.media.speech import SpeechTranscriber
from blogsmith.media.transcoder import AudioTranscoder

logger = logging.getLogger(__name__)


class TranscriptionService:
    """
    Transcode an uploaded video and transcribe its audio.

    The uploaded video and the intermediate WAV are always removed,
    whether transcription succeeds or not.
    """

    def __init__(self, transcoder: AudioTranscoder, transcriber: SpeechTranscriber):
        self.transcoder = transcoder
        self.transcriber = transcriber

    async def transcribe_video(self, video_path: str | Path) -> str:
        """
        Produce the transcript of video_path.

        Raises:
            TranscodingError: audio extraction failed
            RecognitionError: speech recognition failed
        """
        video_path = Path(video_path)
        audio_path = video_path.with_suffix(".wav")

        try:
            await self.transcoder.extract_audio(video_path, audio_path)
            audio_bytes = await asyncio.to_thread(audio_path.read_bytes)
            return await self.transcriber.transcribe(audio_bytes)
        finally:
            video_path.unlink(missing_ok=True)
            audio_path.unlink(missing_ok=True)
            logger.debug(f"Cleaned up {video_path.name}")
