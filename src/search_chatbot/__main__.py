import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from search_chatbot.app_config import load_json_config, parse_app_config, resolve_runtime_env
from search_chatbot.bootstrap import bootstrap_runtime
from search_chatbot.models import Message
from search_chatbot.system_prompt import get_system_prompt
from search_chatbot.turn_engine import FAREWELL_MESSAGE

_USER_PROMPT = "you> "
_LINE_PREFIX = "assistant> "


async def main() -> None:
    load_dotenv()

    config = parse_app_config(load_json_config())
    env = resolve_runtime_env(config.provider_name)
    if not env.provider_api_key:
        logger.error(f"{env.provider_env_var} environment variable is required.")
        sys.exit(1)

    runtime = bootstrap_runtime(config, env)

    print("mr.sk GPT (type 'bye' to quit)")
    print(f"Model: {config.model}")
    print(f"Tools: {', '.join(runtime.tool_registry.names)}")
    if runtime.log_descriptions:
        print(f"Logging: {', '.join(runtime.log_descriptions)}")
    print()

    # One implicit session for the life of the process; the store is not used.
    messages: list[Message] = [Message.system(get_system_prompt())]

    try:
        while True:
            try:
                user_input = input(_USER_PROMPT)
            except (EOFError, KeyboardInterrupt):
                break

            if user_input.lower() == "bye":
                print(FAREWELL_MESSAGE)
                break

            try:
                result = await runtime.turn_engine.run(messages=messages, user_message=user_input)
                print(f"{_LINE_PREFIX}{result.answer}\n")
            except Exception as ex:
                logger.error(f"Unhandled error: {ex}")
    finally:
        await runtime.shutdown()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
