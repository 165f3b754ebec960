"""Constants used throughout the splitscribe tools."""

# Transcript naming
TRANSCRIPTION_SUFFIX = "_transcription.txt"
DEFAULT_SEGMENT_PATTERN = TRANSCRIPTION_SUFFIX
DEFAULT_COMBINED_FILENAME = "combined_transcript.txt"

# Splitting
DEFAULT_SPLIT_DIR = "split_audio"
DEFAULT_SEGMENT_SECONDS = 600
DEFAULT_SEGMENT_MINUTES = 10
CHUNK_INDEX_FORMAT = "%03d"
FFMPEG_BINARY = "ffmpeg"
FFMPEG_INSTALL_HINT = "Installation instructions: https://ffmpeg.org/download.html"

# Transcription
DEFAULT_TRANSCRIBE_MODEL = "whisper-1"
API_KEY_ENV = "OPENAI_API_KEY"
AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a", ".mp4", ".mpeg", ".mpga", ".webm")

# Logging
LOGGER_NAME = "SplitScribe"
LOG_DIR_ENV = "SPLITSCRIBE_LOG_DIR"
