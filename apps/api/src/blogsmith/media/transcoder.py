"""Audio transcoder - extract a speech-ready track with ffmpeg."""

import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class TranscodingError(Exception):
    """ffmpeg could not produce the audio file."""


class AudioTranscoder:
    """Convert a video into mono 16-bit PCM WAV."""

    def __init__(self, ffmpeg_binary: str = "ffmpeg", sample_rate_hz: int = 16000):
        self.ffmpeg_binary = ffmpeg_binary
        self.sample_rate_hz = sample_rate_hz

    def build_command(self, video_path: Path, audio_path: Path) -> list[str]:
        return [
            self.ffmpeg_binary,
            "-y",
            "-i",
            str(video_path),
            "-vn",
            "-ac",
            "1",
            "-ar",
            str(self.sample_rate_hz),
            "-acodec",
            "pcm_s16le",
            "-f",
            "wav",
            str(audio_path),
        ]

    async def extract_audio(self, video_path: str | Path, audio_path: str | Path) -> Path:
        """
        Transcode video_path into audio_path.

        Raises:
            TranscodingError: ffmpeg missing or exited non-zero
        """
        video_path = Path(video_path)
        audio_path = Path(audio_path)
        cmd = self.build_command(video_path, audio_path)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise TranscodingError(f"ffmpeg binary not found: {self.ffmpeg_binary}")

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            message = (stderr or stdout or b"").decode(errors="replace").strip()
            raise TranscodingError(message.splitlines()[-1] if message else "ffmpeg failed")

        logger.debug(f"Transcoded {video_path.name} -> {audio_path.name}")
        return audio_path
