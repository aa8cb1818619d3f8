"""Tests for the OpenAI chat completion client."""

from __future__ import annotations

import io
import json
import socket
import unittest
from unittest import mock
from urllib import error as urllib_error

from hostpilot.cortex.llm import CortexLLMError, OpenAIChatClient

MESSAGES = [{"role": "user", "content": "hi"}]


def _response(body: bytes) -> mock.MagicMock:
    response = mock.MagicMock()
    response.__enter__.return_value.read.return_value = body
    return response


class OpenAIChatClientTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = OpenAIChatClient(api_key="sk-test", model="gpt-4o-mini", timeout_seconds=5)

    def test_missing_key_fails_without_network(self) -> None:
        client = OpenAIChatClient(api_key=None, model="gpt-4o-mini")

        with mock.patch("hostpilot.cortex.llm.urllib_request.urlopen") as urlopen:
            with self.assertRaises(CortexLLMError) as ctx:
                client.complete(MESSAGES, temperature=0.2)

        self.assertEqual(ctx.exception.kind, "not_configured")
        urlopen.assert_not_called()

    def test_returns_stripped_content_and_sends_temperature(self) -> None:
        body = json.dumps({"choices": [{"message": {"content": "  Paid.  "}}]}).encode("utf-8")
        with mock.patch("hostpilot.cortex.llm.urllib_request.urlopen", return_value=_response(body)) as urlopen:
            answer = self.client.complete(MESSAGES, temperature=0.2)

        self.assertEqual(answer, "Paid.")
        request = urlopen.call_args.args[0]
        self.assertEqual(request.full_url, "https://api.openai.com/v1/chat/completions")
        payload = json.loads(request.data.decode("utf-8"))
        self.assertEqual(payload["temperature"], 0.2)
        self.assertEqual(payload["model"], "gpt-4o-mini")
        self.assertEqual(urlopen.call_args.kwargs["timeout"], 5)

    def test_malformed_body(self) -> None:
        with mock.patch("hostpilot.cortex.llm.urllib_request.urlopen", return_value=_response(b"{}")):
            with self.assertRaises(CortexLLMError) as ctx:
                self.client.complete(MESSAGES, temperature=0.2)

        self.assertEqual(ctx.exception.kind, "malformed_response")

    def test_http_status_maps_to_kind(self) -> None:
        cases = {401: "authentication", 429: "rate_limit", 504: "timeout", 500: "unavailable"}
        for status, kind in cases.items():
            http_error = urllib_error.HTTPError(
                "https://api.openai.com/v1/chat/completions", status, "error", {}, io.BytesIO(b"detail")
            )
            with mock.patch("hostpilot.cortex.llm.urllib_request.urlopen", side_effect=http_error):
                with self.assertRaises(CortexLLMError) as ctx:
                    self.client.complete(MESSAGES, temperature=0.2)
            self.assertEqual(ctx.exception.kind, kind)

    def test_network_timeout(self) -> None:
        with mock.patch(
            "hostpilot.cortex.llm.urllib_request.urlopen",
            side_effect=urllib_error.URLError(socket.timeout("timed out")),
        ):
            with self.assertRaises(CortexLLMError) as ctx:
                self.client.complete(MESSAGES, temperature=0.2)

        self.assertEqual(ctx.exception.kind, "timeout")

    def test_connection_refused_is_unavailable(self) -> None:
        with mock.patch(
            "hostpilot.cortex.llm.urllib_request.urlopen",
            side_effect=urllib_error.URLError(ConnectionRefusedError("refused")),
        ):
            with self.assertRaises(CortexLLMError) as ctx:
                self.client.complete(MESSAGES, temperature=0.2)

        self.assertEqual(ctx.exception.kind, "unavailable")


if __name__ == "__main__":
    unittest.main()
