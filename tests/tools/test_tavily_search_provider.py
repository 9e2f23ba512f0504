import asyncio
import json
import unittest

import httpx

from search_chatbot.tools.web.tavily_search_provider import TavilySearchProvider


class TavilySearchProviderTests(unittest.TestCase):
    def test_posts_query_and_parses_results(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={
                "query": "python",
                "results": [
                    {"title": "Python", "url": "https://python.org", "content": "Python is a language", "score": 0.9},
                    {"url": "https://docs.python.org", "content": "Docs"},
                ],
            })

        provider = TavilySearchProvider("tvly-key", transport=httpx.MockTransport(handler))
        results = asyncio.run(provider.search("python", 5))

        self.assertEqual(2, len(results))
        self.assertEqual("Python is a language", results[0].content)
        self.assertEqual("(no title)", results[1].title)
        request = seen[0]
        self.assertEqual("POST", request.method)
        self.assertEqual("Bearer tvly-key", request.headers["Authorization"])
        body = json.loads(request.content)
        self.assertEqual("python", body["query"])
        self.assertEqual(5, body["max_results"])

    def test_http_error_status_raises(self) -> None:
        provider = TavilySearchProvider(
            "tvly-key",
            transport=httpx.MockTransport(lambda request: httpx.Response(401, json={"detail": "bad key"})),
        )
        with self.assertRaises(httpx.HTTPStatusError):
            asyncio.run(provider.search("python", 5))

    def test_missing_results_key_gives_empty_list(self) -> None:
        provider = TavilySearchProvider(
            "tvly-key",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})),
        )
        self.assertEqual([], asyncio.run(provider.search("python", 5)))

    def test_null_fields_become_empty_text(self) -> None:
        provider = TavilySearchProvider(
            "tvly-key",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"results": [{"title": None, "url": None, "content": None}]})
            ),
        )
        result = asyncio.run(provider.search("python", 5))[0]
        self.assertEqual("", result.content)
        self.assertEqual("", result.url)
        self.assertEqual("(no title)", result.title)

    def test_missing_api_key_raises_before_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        provider = TavilySearchProvider("", transport=httpx.MockTransport(handler))
        with self.assertRaises(RuntimeError):
            asyncio.run(provider.search("python", 5))


if __name__ == "__main__":
    unittest.main()
