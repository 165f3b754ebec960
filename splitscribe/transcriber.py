import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from openai import OpenAI, OpenAIError, APIStatusError

from .constants import DEFAULT_TRANSCRIBE_MODEL, TRANSCRIPTION_SUFFIX
from .core.console import console
from .errors import RemoteCallFailedError

logger = logging.getLogger("SplitScribe.Transcriber")

PathLike = Union[str, Path]


def transcript_path_for(audio_path: PathLike) -> Path:
    """``talk_003.mp3`` -> ``talk_003_transcription.txt`` in the same directory."""
    audio_path = Path(audio_path)
    return audio_path.with_name(f"{audio_path.stem}{TRANSCRIPTION_SUFFIX}")


class TranscriptionClient:
    """Sends audio files to the OpenAI transcription endpoint."""

    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_TRANSCRIBE_MODEL, client: Optional[OpenAI] = None):
        self.model = model
        # One attempt per file; failures are reported to the caller
        self.client = client or OpenAI(api_key=api_key, max_retries=0)

    def transcribe(self, audio_path: PathLike, language: Optional[str] = None) -> str:
        """
        Transcribe a single audio file and return its text.

        Raises:
            RemoteCallFailedError: The file could not be read or the API call failed.
        """
        audio_path = Path(audio_path)
        params: Dict[str, Any] = {"model": self.model}
        if language:
            params["language"] = language
            console.print(f"Language specified: {language}")

        try:
            with open(audio_path, "rb") as audio_file:
                with console.status(f"Transcribing {audio_path.name}"):
                    response = self.client.audio.transcriptions.create(file=audio_file, **params)
        except APIStatusError as e:
            raise RemoteCallFailedError(
                e.message,
                status_code=e.status_code,
                details=e.response.text if e.response is not None else None,
            ) from e
        except (OpenAIError, OSError) as e:
            raise RemoteCallFailedError(str(e)) from e

        logger.debug(f"Transcription response for {audio_path}: {len(response.text)} characters")
        return response.text

    def transcribe_to_file(self, audio_path: PathLike, language: Optional[str] = None) -> bool:
        """
        Transcribe ``audio_path`` and save the text next to it.

        Remote failures and transcript write errors are reported here and
        turned into ``False`` so a batch run can carry on with the next file.
        """
        audio_path = Path(audio_path)
        console.print(f"Transcribing: {audio_path}")

        try:
            text = self.transcribe(audio_path, language=language)
        except RemoteCallFailedError as e:
            logger.error(f"Transcription of {audio_path} failed: {e}")
            console.error(f"Error during transcription of {audio_path}: {e}")
            if e.status_code is not None:
                console.error(f"API error details: {e.status_code} {e.details or ''}".rstrip())
            return False

        console.print("\nTranscription:")
        console.print(text)

        output_path = transcript_path_for(audio_path)
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            logger.error(f"Could not save transcription of {audio_path} to {output_path}: {e}")
            console.error(f"Could not save transcription to {output_path}: {e}")
            return False

        logger.info(f"Saved transcription of {audio_path} to {output_path}")
        console.print(f"\nTranscription saved to: {output_path}")
        return True
