import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .batch import transcribe_directory
from .constants import DEFAULT_COMBINED_FILENAME, DEFAULT_SEGMENT_PATTERN
from .core.config import load_config, require_api_key
from .core.console import console
from .core.models import AppConfig, CombineRequest, SplitRequest, TranscribeRequest
from .errors import InvalidArgumentError, NotFoundError, SplitScribeError
from .segments import combine_segments
from .splitter import check_ffmpeg, split_audio
from .transcriber import TranscriptionClient
from .utils import setup_logging
from .wizard import AskFn, ask_segment_minutes

logger = logging.getLogger("SplitScribe.CLI")


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises instead of exiting on bad input."""

    def error(self, message):
        raise InvalidArgumentError(message)


def _parser(prog: str, description: str, epilog: str) -> ArgumentParser:
    parser = ArgumentParser(
        prog=prog,
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging.")
    return parser


# --- Parsers ---

def build_combine_parser() -> ArgumentParser:
    parser = _parser(
        "splitscribe-combine",
        "Transcription Combiner Tool: join per-segment transcripts into one document.",
        "Example:\n"
        "  splitscribe-combine split_audio combined_transcript.txt\n"
        "  splitscribe-combine -p _en_transcription.txt split_audio combined_en.txt",
    )
    parser.add_argument("input_directory", nargs="?", help="Directory containing the transcription files")
    parser.add_argument("output_file", nargs="?", help="Where to write the combined transcript")
    parser.add_argument("-p", "--pattern", default=None,
                        help=f'File pattern to match (default: "{DEFAULT_SEGMENT_PATTERN}")')
    parser.add_argument("--legacy-order", action="store_true",
                        help="Compare names pairwise (number vs number, otherwise as text) instead of the strict ordering")
    return parser


def build_transcribe_parser() -> ArgumentParser:
    parser = _parser(
        "splitscribe-transcribe",
        "Audio Transcription Tool: transcribe a file, or every audio file in a directory.",
        "Example:\n"
        "  splitscribe-transcribe --language en samples/audio.mp3\n"
        "  splitscribe-transcribe --batch split_audio",
    )
    parser.add_argument("file_path", nargs="?", help="Audio file to transcribe")
    parser.add_argument("-b", "--batch", metavar="DIRECTORY", help="Process all audio files in directory")
    parser.add_argument("-l", "--language", help="Specify language (e.g., 'en', 'fr', 'es')")
    return parser


def build_split_parser() -> ArgumentParser:
    parser = _parser(
        "splitscribe-split",
        "Audio Splitter Tool: cut an audio file into fixed-length segments with ffmpeg.",
        "Example:\n"
        "  splitscribe-split -d 300 -o chunks longaudio.mp3",
    )
    parser.add_argument("input_file", nargs="?", help="The audio file to split")
    parser.add_argument("-o", "--output", metavar="DIRECTORY", help='Output directory (default: "split_audio")')
    parser.add_argument("-d", "--duration", metavar="SECONDS", type=int,
                        help="Segment duration in seconds (default: 600)")
    return parser


def build_split_custom_parser() -> ArgumentParser:
    parser = _parser(
        "splitscribe-split-custom",
        "Custom Audio Splitter: asks for the segment duration in minutes, then splits the file.",
        "Example:\n"
        "  splitscribe-split-custom recording.mp3 my_segments",
    )
    parser.add_argument("input_file", nargs="?", help="The audio file to split")
    parser.add_argument("output_directory", nargs="?", help='Where to save the segments (default: "split_audio")')
    return parser


# --- Validation: parsed args + config -> request, no side effects ---

def combine_request(args: argparse.Namespace, config: AppConfig) -> CombineRequest:
    if not args.input_directory or not args.output_file:
        raise InvalidArgumentError("Please provide both input directory and output file.")
    if args.pattern is not None and not args.pattern:
        raise InvalidArgumentError("Pattern must not be empty.")
    return CombineRequest(
        input_dir=Path(args.input_directory),
        output_file=Path(args.output_file),
        pattern=args.pattern or config.combine.pattern,
        strict_order=config.combine.strict_order and not args.legacy_order,
        verbose=args.verbose,
    )


def transcribe_request(args: argparse.Namespace) -> TranscribeRequest:
    if args.batch is None and not args.file_path:
        raise InvalidArgumentError("Please provide a file path or --batch <directory>.")
    if args.batch is not None and not args.batch:
        raise InvalidArgumentError("--batch requires a directory.")
    return TranscribeRequest(
        file_path=Path(args.file_path) if args.file_path else None,
        batch_dir=Path(args.batch) if args.batch else None,
        language=args.language or None,
        verbose=args.verbose,
    )


def split_request(args: argparse.Namespace, config: AppConfig) -> SplitRequest:
    if not args.input_file:
        raise InvalidArgumentError("Please provide an input file.")
    duration = args.duration if args.duration is not None else config.split.segment_seconds
    if duration <= 0:
        raise InvalidArgumentError(f"Segment duration must be a positive number of seconds, got: {duration}")
    return SplitRequest(
        input_file=Path(args.input_file),
        output_dir=Path(args.output or config.split.output_dir),
        segment_seconds=duration,
        verbose=args.verbose,
    )


def split_custom_request(args: argparse.Namespace, config: AppConfig) -> SplitRequest:
    if not args.input_file:
        raise InvalidArgumentError("Please provide an input file.")
    return SplitRequest(
        input_file=Path(args.input_file),
        output_dir=Path(args.output_directory or config.split.output_dir),
        verbose=args.verbose,
    )


# Options may appear between the positionals ("dir -p _en.txt out.txt")

def parse_combine_args(argv: List[str], config: AppConfig) -> CombineRequest:
    return combine_request(build_combine_parser().parse_intermixed_args(argv), config)


def parse_transcribe_args(argv: List[str]) -> TranscribeRequest:
    return transcribe_request(build_transcribe_parser().parse_intermixed_args(argv))


def parse_split_args(argv: List[str], config: AppConfig) -> SplitRequest:
    return split_request(build_split_parser().parse_intermixed_args(argv), config)


def parse_split_custom_args(argv: List[str], config: AppConfig) -> SplitRequest:
    return split_custom_request(build_split_custom_parser().parse_intermixed_args(argv), config)


# --- Entry points ---

def _argv(argv: Optional[List[str]]) -> List[str]:
    return list(sys.argv[1:] if argv is None else argv)


def _setup(config: AppConfig, verbose: bool) -> None:
    setup_logging(log_dir=config.log_dir, debug=verbose or config.debug)


def _execute(tool: str, operation: Callable[[], int]) -> int:
    """Run a tool body and turn failures into an exit status."""
    try:
        return operation()
    except SplitScribeError as e:
        logger.error(f"{tool}: {e}")
        console.error(str(e), hint=getattr(e, "hint", None))
        if isinstance(e, InvalidArgumentError):
            console.print("Run with --help for usage information.")
        return e.exit_code
    except KeyboardInterrupt:
        console.error("Interrupted.")
        return 130
    except Exception as e:
        logger.exception(f"{tool}: unexpected failure")
        console.error(f"An unexpected error occurred: {e}")
        console.verbose_error(tool, e)
        return 1


def _print_next_steps(output_dir: Path) -> None:
    console.print("\nNext steps:")
    console.print("1. Process the segments with the transcription tool:")
    console.print(f"   splitscribe-transcribe -b {output_dir}")
    console.print("2. Combine the transcription files if needed:")
    console.print(f"   splitscribe-combine {output_dir} {DEFAULT_COMBINED_FILENAME}")


def combine_main(argv: Optional[List[str]] = None) -> int:
    argv = _argv(argv)
    parser = build_combine_parser()
    if not argv:
        parser.print_help()
        return 0

    def run() -> int:
        # --help exits here, before any config file is read
        args = parser.parse_intermixed_args(argv)
        config = load_config()
        request = combine_request(args, config)
        _setup(config, request.verbose)
        combine_segments(request.input_dir, request.output_file, request.pattern, strict=request.strict_order)
        return 0

    return _execute("combine", run)


def transcribe_main(argv: Optional[List[str]] = None) -> int:
    argv = _argv(argv)
    parser = build_transcribe_parser()
    if not argv:
        parser.print_help()
        return 0

    def run() -> int:
        request = transcribe_request(parser.parse_intermixed_args(argv))
        config = load_config()
        _setup(config, request.verbose)
        api_key = require_api_key(config)
        language = request.language or config.transcribe.language

        if request.is_batch:
            if request.file_path:
                logger.debug(f"Ignoring {request.file_path} in batch mode")
            client = _transcription_client(api_key, config)
            transcribe_directory(client, request.batch_dir, language=language,
                                 extensions=config.transcribe.audio_extensions)
            # Individual failures are reported in the summary only
            return 0

        if not request.file_path.is_file():
            raise NotFoundError(f"File not found: {request.file_path}")
        client = _transcription_client(api_key, config)
        return 0 if client.transcribe_to_file(request.file_path, language=language) else 1

    return _execute("transcribe", run)


def _transcription_client(api_key: str, config: AppConfig) -> TranscriptionClient:
    return TranscriptionClient(api_key=api_key, model=config.transcribe.model)


def split_main(argv: Optional[List[str]] = None) -> int:
    argv = _argv(argv)
    parser = build_split_parser()
    if not argv:
        parser.print_help()
        return 0

    def run() -> int:
        args = parser.parse_intermixed_args(argv)
        config = load_config()
        request = split_request(args, config)
        _setup(config, request.verbose)
        if not request.input_file.is_file():
            raise NotFoundError(f"File not found: {request.input_file}")

        check_ffmpeg(config.split.ffmpeg_binary)
        split_audio(request.input_file, request.output_dir, request.segment_seconds,
                    binary=config.split.ffmpeg_binary)
        _print_next_steps(request.output_dir)
        return 0

    return _execute("split", run)


def split_custom_main(argv: Optional[List[str]] = None, ask: Optional[AskFn] = None) -> int:
    """
    Interactive splitter. ``ask`` is the input source for the duration
    question; by default the user is prompted on the terminal.
    """
    argv = _argv(argv)
    parser = build_split_custom_parser()
    if not argv:
        parser.print_help()
        return 0

    def run() -> int:
        args = parser.parse_intermixed_args(argv)
        config = load_config()
        request = split_custom_request(args, config)
        _setup(config, request.verbose)
        if not request.input_file.is_file():
            raise NotFoundError(f"File not found: {request.input_file}")

        check_ffmpeg(config.split.ffmpeg_binary)
        minutes = ask_segment_minutes(ask)
        split_audio(request.input_file, request.output_dir, minutes * 60,
                    binary=config.split.ffmpeg_binary)
        _print_next_steps(request.output_dir)
        return 0

    return _execute("split-custom", run)
