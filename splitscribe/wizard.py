import re
import logging
from typing import Callable, Optional

import questionary

from .constants import DEFAULT_SEGMENT_MINUTES
from .core.console import console

logger = logging.getLogger("SplitScribe.Wizard")

DURATION_QUESTION = f"Enter segment duration in minutes (default is {DEFAULT_SEGMENT_MINUTES}):"

# Leading integer, the rest of the answer is ignored ("15min" -> 15)
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

AskFn = Callable[[str], Optional[str]]


def parse_minutes(answer: Optional[str]) -> Optional[int]:
    """Return the positive integer at the start of ``answer``, or None."""
    if not answer:
        return None
    match = LEADING_INT_RE.match(answer)
    if match is None:
        return None
    minutes = int(match.group(1))
    return minutes if minutes > 0 else None


def questionary_ask(question: str) -> Optional[str]:
    """Default input source: a questionary text prompt."""
    answer = questionary.text(question).ask()
    # questionary returns None when the prompt is cancelled with Ctrl+C
    if answer is None:
        raise KeyboardInterrupt
    return answer


def ask_segment_minutes(ask: Optional[AskFn] = None, default: int = DEFAULT_SEGMENT_MINUTES) -> int:
    """
    Ask for a segment duration in whole minutes.

    Args:
        ask: Input source taking the question and returning the raw answer.
            Defaults to an interactive questionary prompt.
        default: Used when the answer is empty, not a number, or not positive.
    """
    ask = ask or questionary_ask
    answer = ask(DURATION_QUESTION)
    minutes = parse_minutes(answer)
    if minutes is None:
        logger.debug(f"Rejected duration answer: {answer!r}")
        console.print(f"Using default duration of {default} minutes.")
        return default
    return minutes
