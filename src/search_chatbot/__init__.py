"""Conversational assistant with web search over an OpenAI-compatible chat API."""

__version__ = "0.1.0"
