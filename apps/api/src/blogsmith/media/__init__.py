"""Media pipeline - upload, transcode, transcribe."""

from blogsmith.media.service import TranscriptionService
from blogsmith.media.speech import RecognitionError, SpeechTranscriber
from blogsmith.media.transcoder import AudioTranscoder, TranscodingError
from blogsmith.media.upload import UploadHandler, UploadRejected, UploadTooLarge

__all__ = [
    "AudioTranscoder",
    "RecognitionError",
    "SpeechTranscriber",
    "TranscodingError",
    "TranscriptionService",
    "UploadHandler",
    "UploadRejected",
    "UploadTooLarge",
]
