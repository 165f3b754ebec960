import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .constants import AUDIO_EXTENSIONS
from .core.console import console
from .core.models import BatchSummary
from .errors import DirectoryNotFoundError
from .transcriber import TranscriptionClient

logger = logging.getLogger("SplitScribe.Batch")


def find_audio_files(directory: Union[str, Path], extensions: Iterable[str] = AUDIO_EXTENSIONS) -> List[Path]:
    """Files in ``directory`` whose suffix is in ``extensions`` (case-insensitive), sorted by name."""
    allowed = {ext.lower() for ext in extensions}
    return sorted(
        (entry for entry in Path(directory).iterdir() if entry.is_file() and entry.suffix.lower() in allowed),
        key=lambda p: p.name,
    )


def transcribe_directory(
    client: TranscriptionClient,
    directory: Union[str, Path],
    language: Optional[str] = None,
    extensions: Iterable[str] = AUDIO_EXTENSIONS,
) -> BatchSummary:
    """
    Transcribe every audio file in ``directory``, one after the other.

    A failed file is counted and the run moves on; it never stops early.

    Raises:
        DirectoryNotFoundError: ``directory`` does not exist.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DirectoryNotFoundError(f"Directory not found: {directory}")

    console.print(f"Processing audio files in: {directory}")
    summary = BatchSummary(directory=directory)

    audio_files = find_audio_files(directory, extensions)
    if not audio_files:
        console.print("No audio files found in the directory.")
        return summary

    console.print(f"Found {len(audio_files)} audio files to process.")

    for i, audio_file in enumerate(audio_files, start=1):
        console.print(f"\nProcessing file {i}/{len(audio_files)}: {audio_file.name}")
        if client.transcribe_to_file(audio_file, language=language):
            summary.succeeded += 1
        else:
            summary.failed += 1

    logger.info(f"Batch {directory}: {summary.succeeded} succeeded, {summary.failed} failed")
    console.print("\nBatch processing complete.")
    console.print(f"Successfully transcribed: {summary.succeeded} files")
    console.print(f"Failed to transcribe: {summary.failed} files")
    return summary
