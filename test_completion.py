import asyncio
import json
import unittest

import httpx

from chatbridge.config.settings import PluginConfiguration
from chatbridge.llm.completion import CompletionService, build_openai_client
from chatbridge.llm.errors import CompletionFailure, CompletionSuccess, FailureReason
from chatbridge.llm.request import build_request

API_ADDRESS = "https://llm.example.test/v1"


def make_service(handler, **overrides) -> CompletionService:
    cfg = {"api_key": "sk-test", "api_address": API_ADDRESS}
    cfg.update(overrides)
    config = PluginConfiguration.from_mapping(cfg)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CompletionService(config, build_openai_client(config, http_client))


def completion_body(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1677652288,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class TestCompletionService(unittest.IsolatedAsyncioTestCase):
    async def test_success_returns_first_choice_content(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["auth"] = request.headers.get("Authorization")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=completion_body("hello"))

        service = make_service(handler, temperature=0.5, max_tokens=42)
        result = await service.complete(build_request(service.config, "hi there"))
        await service.close()

        self.assertEqual(result, CompletionSuccess("hello"))
        self.assertEqual(captured["url"], f"{API_ADDRESS}/chat/completions")
        self.assertEqual(captured["auth"], "Bearer sk-test")
        body = captured["body"]
        self.assertEqual(body["model"], "gpt-3.5-turbo")
        self.assertEqual(body["messages"], [{"role": "user", "content": "hi there"}])
        self.assertEqual(body["temperature"], 0.5)
        self.assertEqual(body["max_tokens"], 42)
        self.assertEqual(body["top_p"], 1)
        self.assertEqual(body["frequency_penalty"], 0)
        self.assertEqual(body["presence_penalty"], 0)
        self.assertNotIn("stop", body)

    async def test_openrouter_headers_sent(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["x-title"] = request.headers.get("X-Title")
            captured["http-referer"] = request.headers.get("HTTP-Referer")
            return httpx.Response(200, json=completion_body("ok"))

        service = make_service(handler, variant="openrouter", default_headers={"X-Title": "my bot"})
        await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(captured.get("x-title"), "my bot")
        self.assertIsNone(captured["http-referer"])

    async def test_status_error_is_upstream_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

        service = make_service(handler)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR") as logs:
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertIsInstance(result, CompletionFailure)
        self.assertEqual(result.reason, FailureReason.UPSTREAM_STATUS)
        self.assertEqual(result.status_code, 401)
        self.assertIn("401", logs.output[0])
        self.assertIn("Incorrect API key provided", logs.output[0])

    async def test_connection_error_is_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        service = make_service(handler)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.NETWORK)
        self.assertIsNone(result.status_code)

    async def test_timeout_is_network(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=completion_body("too late"))

        service = make_service(handler, request_timeout=0.05)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.NETWORK)

    async def test_empty_choices_is_parse_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": "chatcmpl-test", "choices": []})

        service = make_service(handler)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.PARSE)

    async def test_undecodable_json_body_is_parse_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"{not json", headers={"content-type": "application/json"})

        service = make_service(handler)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertIsInstance(result, CompletionFailure)
        self.assertEqual(result.reason, FailureReason.PARSE)

    async def test_non_string_content_is_parse_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": 5}}]})

        service = make_service(handler)
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.PARSE)

    async def test_empty_content_is_parse_failure(self):
        service = make_service(lambda request: httpx.Response(200, json=completion_body("")))
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.PARSE)

    async def test_null_content_is_parse_failure(self):
        service = make_service(lambda request: httpx.Response(200, json=completion_body(None)))
        with self.assertLogs("chatbridge.llm.completion", level="ERROR"):
            result = await service.complete(build_request(service.config, "hi"))
        await service.close()

        self.assertEqual(result.reason, FailureReason.PARSE)


if __name__ == "__main__":
    unittest.main()
