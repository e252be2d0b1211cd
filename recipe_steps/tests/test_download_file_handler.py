import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx

from recipe_steps.src.actions.context import ExecutionContext
from recipe_steps.src.actions.executor import execute_method
from recipe_steps.src.actions.parameters import ParameterBag
from recipe_steps.src.common.errors import InvalidArgumentError
from recipe_steps.src.common.output import BufferedOutput
from recipe_steps.src.services.transfer.downloader import (
    TRANSPORT_HTTPX,
    TRANSPORT_URLLIB,
    select_transport,
)

# 本机 discard 端口：默认无人监听，连接会被立即拒绝
UNREACHABLE_URL = "http://127.0.0.1:9/file.bin"


class FakeResponse:
    def __init__(self, status_code=200, chunks=None, headers=None, fail_after=None):
        self.status_code = status_code
        self.headers = headers if headers is not None else {}
        self._chunks = list(chunks or [])
        self._fail_after = fail_after

    def iter_bytes(self, chunk_size=None):
        _ = chunk_size
        for index, chunk in enumerate(self._chunks):
            if self._fail_after is not None and index >= self._fail_after:
                raise httpx.ReadError("connection reset")
            yield chunk


class FakeStream:
    def __init__(self, resp):
        self._resp = resp

    def __enter__(self):
        return self._resp

    def __exit__(self, exc_type, exc, tb):
        return False


def _fake_client(response=None, error=None, calls=None):
    class FakeClient:
        def __init__(self, timeout=None):
            if calls is not None:
                calls.append({"timeout": timeout})

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def stream(self, method, url, headers=None, follow_redirects=True):
            if calls is not None:
                calls.append({"method": method, "url": url, "follow_redirects": follow_redirects})
            if error is not None:
                raise error
            return FakeStream(response)

    return FakeClient


def _download(url, filename, *, enable_httpx=True, output=None):
    context = ExecutionContext(output=output or BufferedOutput(), enable_httpx=enable_httpx)
    bag = ParameterBag.from_call([], {"url": url, "filename": filename})
    return execute_method("download_file", bag, context)


class TestDownloadFileHandler(unittest.TestCase):
    def test_httpx_download_writes_file_and_reports_progress(self):
        calls = []
        response = FakeResponse(chunks=[b"hello", b"world"], headers={"content-length": "10"})
        output = BufferedOutput()
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("httpx.Client", _fake_client(response, calls=calls)):
                result = _download("http://example.test/file.bin", target, output=output)

            self.assertTrue(result.success)
            self.assertEqual(result.payload, {})
            self.assertEqual(Path(target).read_bytes(), b"helloworld")
            self.assertEqual(os.listdir(tmp), ["out.bin"])

        self.assertEqual(
            output.lines[0],
            f'Downloading file from "http://example.test/file.bin" into "{target}"',
        )
        self.assertEqual(output.lines[1:], ["Downloading 5/10\r", "Downloading 10/10\r"])
        self.assertEqual(calls[1]["method"], "GET")
        self.assertTrue(calls[1]["follow_redirects"])

    def test_unknown_length_progress(self):
        response = FakeResponse(chunks=[b"abc"])
        output = BufferedOutput()
        with tempfile.TemporaryDirectory() as tmp:
            with patch("httpx.Client", _fake_client(response)):
                result = _download("http://example.test/a", os.path.join(tmp, "a"), output=output)
        self.assertTrue(result.success)
        self.assertEqual(output.lines[-1], "Downloading 3/?\r")

    def test_non_200_status_fails_and_keeps_existing_file(self):
        response = FakeResponse(status_code=404, chunks=[b"not found"])
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "keep.txt")
            Path(target).write_text("original", encoding="utf-8")
            with patch("httpx.Client", _fake_client(response)):
                result = _download("http://example.test/missing", target)
            self.assertFalse(result.success)
            self.assertEqual(Path(target).read_text(encoding="utf-8"), "original")
            self.assertEqual(os.listdir(tmp), ["keep.txt"])

    def test_interrupted_stream_leaves_no_partial_file(self):
        response = FakeResponse(chunks=[b"part", b"rest"], fail_after=1)
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("httpx.Client", _fake_client(response)):
                result = _download("http://example.test/file.bin", target)
            self.assertFalse(result.success)
            self.assertEqual(os.listdir(tmp), [])

    def test_connection_error_returns_false(self):
        error = httpx.ConnectError("refused")
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("httpx.Client", _fake_client(error=error)):
                result = _download("http://example.test/file.bin", target)
            self.assertFalse(result.success)
            self.assertFalse(os.path.exists(target))

    def test_failing_output_sink_does_not_abort_download(self):
        class BrokenOutput:
            def write(self, text):
                raise RuntimeError("sink closed")

        response = FakeResponse(chunks=[b"data"])
        with tempfile.TemporaryDirectory() as tmp:
            target = os.path.join(tmp, "out.bin")
            with patch("httpx.Client", _fake_client(response)):
                result = _download("http://example.test/file.bin", target, output=BrokenOutput())
            self.assertTrue(result.success)
            self.assertEqual(Path(target).read_bytes(), b"data")

    def test_unreachable_url_fails_with_either_transport(self):
        for enable_httpx in (True, False):
            with self.subTest(enable_httpx=enable_httpx):
                with tempfile.TemporaryDirectory() as tmp:
                    target = os.path.join(tmp, "out.bin")
                    result = _download(UNREACHABLE_URL, target, enable_httpx=enable_httpx)
                    self.assertFalse(result.success)
                    self.assertFalse(os.path.exists(target))
                    self.assertEqual(os.listdir(tmp), [])

    def test_file_url_with_urllib_transport(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "source.txt"
            source.write_bytes(b"local content")
            target = os.path.join(tmp, "copy.txt")
            result = _download(source.as_uri(), target, enable_httpx=False)
            self.assertTrue(result.success)
            self.assertEqual(Path(target).read_bytes(), b"local content")

    def test_unwritable_destination_fails_with_either_transport(self):
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / "source.txt"
            source.write_bytes(b"x")
            target = os.path.join(tmp, "a\x00b")

            with patch("httpx.Client", _fake_client(FakeResponse(chunks=[b"x"]))):
                via_httpx = _download("http://example.test/a", target)
            via_urllib = _download(source.as_uri(), target, enable_httpx=False)

            self.assertFalse(via_httpx.success)
            self.assertFalse(via_urllib.success)
            self.assertEqual(os.listdir(tmp), ["source.txt"])

    def test_invalid_url_is_rejected_before_io(self):
        with patch("recipe_steps.src.actions.handlers.download_file.download_file") as mocked:
            with self.assertRaises(InvalidArgumentError) as ctx:
                _download("not a url", "out.bin")
        mocked.assert_not_called()
        self.assertEqual(str(ctx.exception), 'The URL "not a url" is not valid.')


class TestSelectTransport(unittest.TestCase):
    def test_prefers_httpx_when_enabled_and_available(self):
        self.assertEqual(select_transport(True), TRANSPORT_HTTPX)

    def test_disabled_uses_urllib(self):
        self.assertEqual(select_transport(False), TRANSPORT_URLLIB)

    def test_missing_httpx_uses_urllib(self):
        with patch(
            "recipe_steps.src.services.transfer.downloader.importlib.util.find_spec",
            return_value=None,
        ):
            self.assertEqual(select_transport(True), TRANSPORT_URLLIB)


if __name__ == "__main__":
    unittest.main()
