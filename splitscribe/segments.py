"""Ordering and combining per-segment transcript files.

A long recording is split into chunks named ``<stem>_000.mp3``,
``<stem>_001.mp3``, ... and every chunk is transcribed into
``<stem>_000_transcription.txt`` and so on. This module puts those transcripts
back in order and joins them into one annotated document.
"""
import re
import logging
from functools import cmp_to_key
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .constants import DEFAULT_SEGMENT_PATTERN
from .core.console import console
from .core.models import CombineResult, SegmentFile
from .errors import DirectoryNotFoundError, NoMatchingFilesError

logger = logging.getLogger("SplitScribe.Segments")

DIGITS_RE = re.compile(r"\d+")

PathLike = Union[str, Path]


def segment_index(name: str) -> Optional[int]:
    """Return the first run of decimal digits in ``name`` as an integer, or None."""
    match = DIGITS_RE.search(name)
    if match is None:
        return None
    return int(match.group(0))


def _compare_names(a: str, b: str) -> int:
    return (a > b) - (a < b)


def compare_segment_names(a: str, b: str) -> int:
    """
    Pairwise comparator used by the legacy ordering.

    Two names with a numeric index compare by that index. If either name has
    no index, both compare as plain strings. Mixing the two modes is not
    transitive, e.g. ``z1 < a2`` numerically while ``a2 < m`` and ``m < z1``
    lexicographically.
    """
    a_index = segment_index(a)
    b_index = segment_index(b)
    if a_index is not None and b_index is not None:
        return (a_index > b_index) - (a_index < b_index)
    return _compare_names(a, b)


def _strict_key(name: str):
    index = segment_index(name)
    if index is None:
        return (0, 0, name)
    # Equal indices keep their input order (sorted() is stable)
    return (1, index, "")


def natural_sort(names: Iterable[str], strict: bool = True) -> List[str]:
    """
    Order segment file names by their embedded number.

    Args:
        names: Candidate file names.
        strict: When True, names without a number come first in string order,
            followed by numbered names in ascending numeric order. When False,
            use ``compare_segment_names`` as-is.

    Returns:
        A new, ordered list.
    """
    if strict:
        return sorted(names, key=_strict_key)
    return sorted(names, key=cmp_to_key(compare_segment_names))


def segment_header(position: int) -> str:
    """Separator placed before the segment at 1-based ``position``."""
    if position == 1:
        return "--- Segment 1 ---\n\n"
    return f"\n\n--- Segment {position} ---\n\n"


def build_document(contents: Iterable[str]) -> str:
    """Join segment texts, each preceded by its numbered header."""
    parts = []
    for position, content in enumerate(contents, start=1):
        parts.append(segment_header(position))
        parts.append(content)
    return "".join(parts)


def find_segment_files(
    directory: PathLike,
    pattern: str = DEFAULT_SEGMENT_PATTERN,
    strict: bool = True,
) -> List[SegmentFile]:
    """
    List the files in ``directory`` whose names contain ``pattern``, in segment order.

    Raises:
        DirectoryNotFoundError: ``directory`` does not exist.
        NoMatchingFilesError: No file name contains ``pattern``.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise DirectoryNotFoundError(f"Directory not found: {directory}")

    # Listing order is filesystem dependent; start from a fixed one
    candidates = sorted(
        entry.name for entry in directory.iterdir()
        if pattern in entry.name and entry.is_file()
    )
    if not candidates:
        raise NoMatchingFilesError(f"No transcription files found in {directory}")

    logger.debug(f"Matched {len(candidates)} files with pattern '{pattern}' in {directory}")

    return [
        SegmentFile(name=name, path=directory / name, index=segment_index(name))
        for name in natural_sort(candidates, strict=strict)
    ]


def _read_segment(path: Path) -> str:
    # newline="" keeps the segment's own line endings intact; invalid bytes become U+FFFD
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def combine_segments(
    input_dir: PathLike,
    output_file: PathLike,
    pattern: str = DEFAULT_SEGMENT_PATTERN,
    strict: bool = True,
) -> CombineResult:
    """
    Combine the transcripts in ``input_dir`` into ``output_file``.

    Every segment is read before the output is opened, so a failure never
    leaves a half-written or truncated destination behind. An existing
    output file is overwritten.
    """
    segments = find_segment_files(input_dir, pattern, strict=strict)
    total = len(segments)
    console.print(f"Found {total} transcription files to combine.")

    contents = []
    for position, segment in enumerate(segments, start=1):
        console.print(f"Processing ({position}/{total}): {segment.name}")
        contents.append(_read_segment(segment.path))

    output_path = Path(output_file)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(build_document(contents))

    logger.info(f"Combined {total} segments from {input_dir} into {output_path}")
    console.print(f"\nCombined transcription saved to: {output_path}")

    return CombineResult(output_file=output_path, segments=segments)
