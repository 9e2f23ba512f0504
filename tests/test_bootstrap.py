import asyncio
import unittest

from search_chatbot.app_config import RuntimeEnv, parse_app_config
from search_chatbot.bootstrap import bootstrap_runtime
from search_chatbot.models import Message, Role


class BootstrapRuntimeTests(unittest.TestCase):
    def setUp(self) -> None:
        app = parse_app_config({"LogConsumers": [], "ConversationTtlSeconds": 120})
        env = RuntimeEnv(provider_api_key="test-key", provider_env_var="GROQ_API_KEY", tavily_api_key=None)
        self._runtime = bootstrap_runtime(app, env)

    def tearDown(self) -> None:
        asyncio.run(self._runtime.shutdown())

    def test_registers_web_search(self) -> None:
        self.assertEqual(["webSearch"], self._runtime.tool_registry.names)

    def test_store_seeds_persona(self) -> None:
        messages = self._runtime.store.get("fresh")
        self.assertEqual(1, len(messages))
        self.assertEqual(Role.SYSTEM, messages[0].role)
        self.assertIn("mr.sk_GPT", messages[0].content)

    def test_shutdown_clears_store(self) -> None:
        self._runtime.store.put("c1", [Message.system("s")])
        asyncio.run(self._runtime.shutdown())
        self.assertEqual(0, len(self._runtime.store))


if __name__ == "__main__":
    unittest.main()
