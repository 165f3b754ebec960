import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from splitscribe.errors import (
    ExternalProcessFailedError,
    InvalidArgumentError,
    NotFoundError,
    SegmentationFailedError,
    ToolNotFoundError,
)
from splitscribe.splitter import (
    build_split_command,
    check_ffmpeg,
    chunk_pattern,
    run_process,
    split_audio,
)


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=["ffmpeg"], returncode=returncode, stdout=stdout, stderr=stderr)


class TestCheckFfmpeg(unittest.TestCase):
    @patch("splitscribe.splitter.subprocess.run")
    def test_available(self, mock_run):
        mock_run.return_value = completed(stdout="ffmpeg version 6.1\n")
        check_ffmpeg()
        mock_run.assert_called_once_with(["ffmpeg", "-version"], capture_output=True, text=True, errors="replace")

    @patch("splitscribe.splitter.subprocess.run")
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("ffmpeg")

        with self.assertRaises(ToolNotFoundError) as context:
            check_ffmpeg()

        self.assertIn("ffmpeg not found", str(context.exception))
        self.assertIn("https://ffmpeg.org/download.html", context.exception.hint)

    @patch("splitscribe.splitter.subprocess.run")
    def test_probe_fails(self, mock_run):
        mock_run.return_value = completed(returncode=1)
        with self.assertRaises(ToolNotFoundError):
            check_ffmpeg("/opt/ffmpeg/bin/ffmpeg")
        self.assertEqual(mock_run.call_args[0][0][0], "/opt/ffmpeg/bin/ffmpeg")


class TestSplitCommand(unittest.TestCase):
    def test_chunk_pattern(self):
        self.assertEqual(chunk_pattern("rec/long talk.m4a", "out"), Path("out") / "long talk_%03d.m4a")

    def test_build_split_command(self):
        command = build_split_command(Path("long.mp3"), Path("split_audio"), 300)
        self.assertEqual(command, [
            "ffmpeg",
            "-i", "long.mp3",
            "-f", "segment",
            "-segment_time", "300",
            "-c", "copy",
            str(Path("split_audio") / "long_%03d.mp3"),
        ])


class TestRunProcess(unittest.TestCase):
    @patch("splitscribe.splitter.subprocess.run")
    def test_outcome(self, mock_run):
        mock_run.return_value = completed(returncode=1, stderr="Input #0, mp3\nError opening output file\n")

        outcome = run_process(["ffmpeg", "-i", "x.mp3"])

        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.returncode, 1)
        self.assertEqual(outcome.diagnostics, ["Input #0, mp3", "Error opening output file"])
        self.assertEqual(outcome.error_lines(), ["Error opening output file"])

    @patch("splitscribe.splitter.subprocess.run")
    def test_undecodable_stderr_is_replaced(self, mock_run):
        mock_run.return_value = completed(stderr="title : caf\ufffd\n")

        outcome = run_process(["ffmpeg", "-i", "x.mp3"])

        self.assertEqual(mock_run.call_args.kwargs["errors"], "replace")
        self.assertEqual(outcome.diagnostics, ["title : caf\ufffd"])


class TestSplitAudio(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.input_file = self.root / "lecture.mp3"
        self.input_file.write_bytes(b"ID3")
        self.output_dir = self.root / "nested" / "chunks"

    def tearDown(self):
        self._tmp.cleanup()

    def _fake_ffmpeg(self, count):
        def run(command, **kwargs):
            for i in range(count):
                (self.output_dir / f"lecture_{i:03d}.mp3").write_bytes(b"chunk")
            return completed(stderr="size=1kB time=00:10:00\n")
        return run

    @patch("splitscribe.splitter.subprocess.run")
    def test_success(self, mock_run):
        mock_run.side_effect = self._fake_ffmpeg(3)

        result = split_audio(self.input_file, self.output_dir, 600)

        self.assertTrue(self.output_dir.is_dir())
        self.assertEqual(result.chunks, ["lecture_000.mp3", "lecture_001.mp3", "lecture_002.mp3"])
        self.assertEqual(result.segment_seconds, 600)
        command = mock_run.call_args[0][0]
        self.assertEqual(command[command.index("-segment_time") + 1], "600")

    @patch("splitscribe.splitter.subprocess.run")
    def test_only_chunks_of_this_input_are_reported(self, mock_run):
        self.output_dir.mkdir(parents=True)
        (self.output_dir / "other_000.mp3").write_bytes(b"x")
        mock_run.side_effect = self._fake_ffmpeg(2)

        result = split_audio(self.input_file, self.output_dir)

        self.assertEqual(result.chunks, ["lecture_000.mp3", "lecture_001.mp3"])

    @patch("splitscribe.splitter.subprocess.run")
    def test_nonzero_exit(self, mock_run):
        mock_run.return_value = completed(returncode=234, stderr="Error while opening encoder\n")

        with self.assertRaises(SegmentationFailedError) as context:
            split_audio(self.input_file, self.output_dir)

        self.assertIsInstance(context.exception, ExternalProcessFailedError)
        self.assertEqual(context.exception.returncode, 234)
        self.assertIn("234", str(context.exception))

    def test_missing_input(self):
        with self.assertRaises(NotFoundError):
            split_audio(self.root / "nope.mp3", self.output_dir)
        self.assertFalse(self.output_dir.exists())

    def test_invalid_duration(self):
        for value in (0, -60, True, "600"):
            with self.assertRaises(InvalidArgumentError):
                split_audio(self.input_file, self.output_dir, value)


if __name__ == '__main__':
    unittest.main()
