import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from splitscribe.batch import find_audio_files, transcribe_directory
from splitscribe.errors import DirectoryNotFoundError
from splitscribe.transcriber import TranscriptionClient


class TestBatch(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.directory = Path(self._tmp.name)
        for name in ["talk_002.mp3", "talk_000.WAV", "talk_001.m4a", "notes.txt", "cover.jpg", "talk_000_transcription.txt"]:
            (self.directory / name).write_bytes(b"x")
        (self.directory / "folder.mp3").mkdir()
        self.client = MagicMock(spec=TranscriptionClient)

    def tearDown(self):
        self._tmp.cleanup()

    def test_find_audio_files(self):
        names = [p.name for p in find_audio_files(self.directory)]
        self.assertEqual(names, ["talk_000.WAV", "talk_001.m4a", "talk_002.mp3"])

    def test_every_audio_file_attempted_once(self):
        self.client.transcribe_to_file.side_effect = [True, False, True]

        summary = transcribe_directory(self.client, self.directory, language="en")

        self.assertEqual(self.client.transcribe_to_file.call_count, 3)
        self.assertEqual(summary.succeeded, 2)
        self.assertEqual(summary.failed, 1)
        self.assertEqual(summary.total, 3)
        attempted = [c.args[0].name for c in self.client.transcribe_to_file.call_args_list]
        self.assertEqual(attempted, ["talk_000.WAV", "talk_001.m4a", "talk_002.mp3"])
        for c in self.client.transcribe_to_file.call_args_list:
            self.assertEqual(c.kwargs["language"], "en")

    def test_failures_do_not_stop_the_run(self):
        self.client.transcribe_to_file.return_value = False

        summary = transcribe_directory(self.client, self.directory)

        self.assertEqual(summary.failed, 3)
        self.assertEqual(summary.succeeded, 0)

    def test_unwritable_transcript_does_not_stop_the_run(self):
        api = MagicMock()
        api.audio.transcriptions.create.return_value = MagicMock(text="hello")
        client = TranscriptionClient(client=api)
        (self.directory / "talk_000_transcription.txt").unlink()
        (self.directory / "talk_000_transcription.txt").mkdir()

        summary = transcribe_directory(client, self.directory)

        self.assertEqual(api.audio.transcriptions.create.call_count, 3)
        self.assertEqual(summary.failed, 1)
        self.assertEqual(summary.succeeded, 2)
        self.assertEqual((self.directory / "talk_002_transcription.txt").read_text(encoding="utf-8"), "hello")

    def test_no_audio_files(self):
        with tempfile.TemporaryDirectory() as empty:
            (Path(empty) / "readme.md").write_text("hi")
            summary = transcribe_directory(self.client, empty)

        self.assertEqual(summary.total, 0)
        self.client.transcribe_to_file.assert_not_called()

    def test_missing_directory(self):
        with self.assertRaises(DirectoryNotFoundError):
            transcribe_directory(self.client, self.directory / "missing")


if __name__ == '__main__':
    unittest.main()
