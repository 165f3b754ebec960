import logging
import subprocess
from pathlib import Path
from typing import List, Union

from .constants import (
    CHUNK_INDEX_FORMAT,
    DEFAULT_SEGMENT_SECONDS,
    DEFAULT_SPLIT_DIR,
    FFMPEG_BINARY,
    FFMPEG_INSTALL_HINT,
)
from .core.console import console
from .core.models import ProcessOutcome, SplitResult
from .errors import InvalidArgumentError, NotFoundError, SegmentationFailedError, ToolNotFoundError

logger = logging.getLogger("SplitScribe.Splitter")

PathLike = Union[str, Path]


def check_ffmpeg(binary: str = FFMPEG_BINARY) -> None:
    """
    Verify ffmpeg can be executed.

    Raises:
        ToolNotFoundError: The binary is missing or its version probe fails.
    """
    try:
        result = subprocess.run([binary, "-version"], capture_output=True, text=True, errors="replace")
    except FileNotFoundError:
        raise ToolNotFoundError(
            "ffmpeg not found. Please install ffmpeg to use this tool.",
            hint=FFMPEG_INSTALL_HINT,
        )

    if result.returncode != 0:
        raise ToolNotFoundError("Error checking ffmpeg installation.", hint=FFMPEG_INSTALL_HINT)

    version_line = result.stdout.splitlines()[0] if result.stdout else binary
    logger.debug(f"Using {version_line}")


def validate_segment_seconds(segment_seconds: int) -> int:
    if isinstance(segment_seconds, bool) or not isinstance(segment_seconds, int) or segment_seconds <= 0:
        raise InvalidArgumentError(f"Segment duration must be a positive number of seconds, got: {segment_seconds}")
    return segment_seconds


def chunk_pattern(input_file: PathLike, output_dir: PathLike) -> Path:
    """Output template handed to ffmpeg, e.g. ``split_audio/talk_%03d.mp3``."""
    input_file = Path(input_file)
    return Path(output_dir) / f"{input_file.stem}_{CHUNK_INDEX_FORMAT}{input_file.suffix}"


def build_split_command(
    input_file: PathLike,
    output_dir: PathLike,
    segment_seconds: int = DEFAULT_SEGMENT_SECONDS,
    binary: str = FFMPEG_BINARY,
) -> List[str]:
    """Stream-copy ``input_file`` into fixed-length segments; no re-encoding."""
    return [
        binary,
        "-i", str(input_file),
        "-f", "segment",
        "-segment_time", str(segment_seconds),
        "-c", "copy",
        str(chunk_pattern(input_file, output_dir)),
    ]


def run_process(command: List[str]) -> ProcessOutcome:
    """
    Run an external command to completion.

    Blocks until the process exits; stderr is captured line by line as
    diagnostics. A nonzero exit status is reported in the outcome, not raised.
    """
    logger.debug(f"Running: {' '.join(command)}")
    # Tag metadata in ffmpeg's stderr is not always valid UTF-8
    completed = subprocess.run(command, capture_output=True, text=True, errors="replace")
    return ProcessOutcome(
        command=command,
        returncode=completed.returncode,
        diagnostics=(completed.stderr or "").splitlines(),
    )


def list_chunks(output_dir: PathLike, stem: str) -> List[str]:
    return sorted(entry.name for entry in Path(output_dir).iterdir() if entry.name.startswith(stem))


def split_audio(
    input_file: PathLike,
    output_dir: PathLike = DEFAULT_SPLIT_DIR,
    segment_seconds: int = DEFAULT_SEGMENT_SECONDS,
    binary: str = FFMPEG_BINARY,
) -> SplitResult:
    """
    Cut ``input_file`` into ``segment_seconds``-long chunks inside ``output_dir``.

    The output directory is created if needed. Chunk boundaries are decided
    by ffmpeg; success is judged by its exit status only.

    Raises:
        NotFoundError: ``input_file`` does not exist.
        InvalidArgumentError: ``segment_seconds`` is not a positive integer.
        SegmentationFailedError: ffmpeg exited with a nonzero status.
    """
    input_file = Path(input_file)
    output_dir = Path(output_dir)
    validate_segment_seconds(segment_seconds)

    if not input_file.is_file():
        raise NotFoundError(f"File not found: {input_file}")

    output_dir.mkdir(parents=True, exist_ok=True)

    if segment_seconds % 60 == 0:
        console.print(f"Splitting {input_file} into {segment_seconds // 60} minute segments ({segment_seconds} seconds)...")
    else:
        console.print(f"Splitting {input_file} into {segment_seconds} second segments...")

    command = build_split_command(input_file, output_dir, segment_seconds, binary)
    with console.status(f"Running ffmpeg on {input_file.name}"):
        outcome = run_process(command)

    for line in outcome.error_lines():
        console.error(line)

    if not outcome.succeeded:
        for line in outcome.diagnostics[-10:]:
            logger.debug(f"ffmpeg: {line}")
        raise SegmentationFailedError(
            f"FFmpeg process exited with code {outcome.returncode}",
            returncode=outcome.returncode,
        )

    console.success("Audio splitting complete!")

    chunks = list_chunks(output_dir, input_file.stem)
    console.print(f"Created {len(chunks)} segments in {output_dir}:")
    for name in chunks:
        console.print(f"- {name}")

    logger.info(f"Split {input_file} into {len(chunks)} chunks of {segment_seconds}s in {output_dir}")
    return SplitResult(
        input_file=input_file,
        output_dir=output_dir,
        segment_seconds=segment_seconds,
        chunks=chunks,
    )
