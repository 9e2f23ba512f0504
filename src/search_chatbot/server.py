"""HTTP adapter: FastAPI application exposing the chatbot.

Usage:
    search-chatbot-server

Or directly:
    uvicorn search_chatbot.server:create_app --factory --port 3001
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from search_chatbot.app_config import load_json_config, parse_app_config, resolve_runtime_env
from search_chatbot.bootstrap import bootstrap_runtime
from search_chatbot.chatbot import Chatbot
from search_chatbot.conversation_store import ConversationStore
from search_chatbot.logging_config import setup_logging

WELCOME_MESSAGE = "Welcome to mr.sk GPT!"
BAD_REQUEST_MESSAGE = "Bad request! Please provide required fields"

_PRUNE_INTERVAL_SECONDS = 600


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    conversation_id: str | None = Field(default=None, alias="conversationId")


class ChatResponse(BaseModel):
    message: str


async def _prune_periodically(store: ConversationStore) -> None:
    while True:
        await asyncio.sleep(_PRUNE_INTERVAL_SECONDS)
        store.prune_expired()


@asynccontextmanager
async def _runtime_lifespan(app: FastAPI):
    load_dotenv()
    config = parse_app_config(load_json_config())
    runtime = bootstrap_runtime(config, resolve_runtime_env(config.provider_name))
    app.state.chatbot = runtime.chatbot
    pruner = asyncio.create_task(_prune_periodically(runtime.store))
    try:
        yield
    finally:
        pruner.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await pruner
        await runtime.shutdown()


def _bad_request() -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": BAD_REQUEST_MESSAGE})


def create_app(chatbot: Chatbot | None = None) -> FastAPI:
    """Build the FastAPI app.

    With ``chatbot`` given, it is used as is and no runtime is bootstrapped;
    otherwise the lifespan handler builds one from ``config.json`` and the
    environment and tears it down on shutdown.
    """
    app = FastAPI(
        title="mr.sk GPT",
        lifespan=None if chatbot is not None else _runtime_lifespan,
    )
    if chatbot is not None:
        app.state.chatbot = chatbot

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return _bad_request()

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return WELCOME_MESSAGE

    @app.post("/chat", response_model=ChatResponse)
    async def chat(payload: ChatRequest, request: Request):
        if not payload.message or not payload.conversation_id:
            return _bad_request()

        logger.info(f"Message [{payload.conversation_id}]: {payload.message}")
        result = await request.app.state.chatbot.generate(payload.message, payload.conversation_id)
        return ChatResponse(message=result)

    return app


def main() -> None:
    import uvicorn

    load_dotenv()
    config = parse_app_config(load_json_config())
    setup_logging(level=config.log_level, consumers=config.log_consumers)
    logger.info(f"Server is running on port: {config.port}")
    uvicorn.run(
        "search_chatbot.server:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
