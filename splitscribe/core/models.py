from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, SecretStr

from ..constants import (
    AUDIO_EXTENSIONS,
    DEFAULT_SEGMENT_PATTERN,
    DEFAULT_SEGMENT_SECONDS,
    DEFAULT_SPLIT_DIR,
    DEFAULT_TRANSCRIBE_MODEL,
    FFMPEG_BINARY,
)

# --- Configuration ---

class TranscribeConfig(BaseModel):
    api_key: Optional[SecretStr] = None
    model: str = DEFAULT_TRANSCRIBE_MODEL
    language: Optional[str] = None
    audio_extensions: List[str] = Field(default_factory=lambda: list(AUDIO_EXTENSIONS))

class SplitConfig(BaseModel):
    output_dir: str = DEFAULT_SPLIT_DIR
    segment_seconds: int = Field(default=DEFAULT_SEGMENT_SECONDS, gt=0)
    ffmpeg_binary: str = FFMPEG_BINARY

class CombineConfig(BaseModel):
    pattern: str = DEFAULT_SEGMENT_PATTERN
    strict_order: bool = True

class AppConfig(BaseModel):
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)
    split: SplitConfig = Field(default_factory=SplitConfig)
    combine: CombineConfig = Field(default_factory=CombineConfig)
    debug: bool = False
    log_dir: Optional[str] = None

# --- Segments ---

class SegmentFile(BaseModel):
    """A transcript file that belongs to an ordered sequence of segments."""
    name: str
    path: Path
    index: Optional[int] = None

class CombineResult(BaseModel):
    output_file: Path
    segments: List[SegmentFile] = Field(default_factory=list)

# --- External processes ---

class ProcessOutcome(BaseModel):
    """Result of a finished external process."""
    command: List[str]
    returncode: int
    diagnostics: List[str] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def error_lines(self) -> List[str]:
        return [line for line in self.diagnostics if "Error" in line]

class SplitResult(BaseModel):
    input_file: Path
    output_dir: Path
    segment_seconds: int
    chunks: List[str] = Field(default_factory=list)

# --- Transcription ---

class BatchSummary(BaseModel):
    directory: Path
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

# --- CLI requests ---

class CombineRequest(BaseModel):
    input_dir: Path
    output_file: Path
    pattern: str = DEFAULT_SEGMENT_PATTERN
    strict_order: bool = True
    verbose: bool = False

class TranscribeRequest(BaseModel):
    file_path: Optional[Path] = None
    batch_dir: Optional[Path] = None
    language: Optional[str] = None
    verbose: bool = False

    @property
    def is_batch(self) -> bool:
        return self.batch_dir is not None

class SplitRequest(BaseModel):
    input_file: Path
    output_dir: Path
    segment_seconds: Optional[int] = None
    verbose: bool = False
