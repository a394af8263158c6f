# docs_explorer/search/llm.py
"""
Question answering over documentation pages with an external LLM.

The model is treated as text in, text out: :func:`build_prompt` embeds the
pages into a fixed template, a provider client returns the raw answer, and
related queries and code snippets are pulled out of that answer with regular
expressions. That parsing is best effort and only understands the section
headers and fenced code blocks listed below.
"""
from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from aiohttp import ClientError, ClientResponse, ClientSession

from docs_explorer.errors import LLMError, UnknownProviderError
from docs_explorer.logger import get_logger

logger = get_logger("llm")

CONTEXT_CHARS = 1500
MAX_TOKENS = 1024

PROMPT_TEMPLATE = """
You are a helpful documentation assistant for Factory AI and related developer tools.
Answer the following question based on the documentation provided below.
If the answer cannot be found in the documentation, say so clearly.

Question: {query}

Documentation:
{context}

Provide a clear, concise answer with code examples if relevant.
If appropriate, suggest related queries the user might want to ask.
"""

PAGE_TEMPLATE = """
Title: {title}
URL: {url}
Source: {source}
Content:
{content}
---
"""

_RELATED_SECTIONS = (
    re.compile(r"related quer(?:y|ies):(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL),
    re.compile(r"you might also want to ask:(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL),
    re.compile(r"other questions you might have:(.*?)(?:\n\n|\Z)", re.IGNORECASE | re.DOTALL),
)
_BULLET_RE = re.compile(r"^[•\-*]\s*")
_CODE_BLOCK_RE = re.compile(r"```(\w*)\n([\s\S]*?)```")


@dataclass(slots=True)
class SourcePage:
    id: str
    title: str
    url: str
    content: str
    source: str


@dataclass(slots=True)
class AIAnswer:
    answer: str
    source_pages: List[str] = field(default_factory=list)
    related_queries: List[str] = field(default_factory=list)
    code_snippets: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "sourcePages": list(self.source_pages),
            "relatedQueries": list(self.related_queries),
            "codeSnippets": list(self.code_snippets),
        }


def build_prompt(query: str, pages: Sequence[SourcePage]) -> str:
    context = "\n".join(
        PAGE_TEMPLATE.format(
            title=page.title,
            url=page.url,
            source=page.source,
            content=(page.content or "")[:CONTEXT_CHARS],
        )
        for page in pages
    )
    return PROMPT_TEMPLATE.format(query=query, context=context)


def extract_related_queries(text: str) -> List[str]:
    for pattern in _RELATED_SECTIONS:
        match = pattern.search(text)
        if match and match.group(1):
            lines = (_BULLET_RE.sub("", line.strip()).strip() for line in match.group(1).split("\n"))
            return [line for line in lines if 0 < len(line) < 100][:5]
    return []


def _code_description(text: str, position: int) -> str:
    for line in reversed(text[:position].strip().split("\n")):
        line = line.strip()
        if line and not line.startswith("#") and not line.startswith("//"):
            return line
    return ""


def extract_code_snippets(text: str) -> List[Dict[str, str]]:
    snippets: List[Dict[str, str]] = []
    for match in _CODE_BLOCK_RE.finditer(text):
        code = match.group(2).strip()
        if not code:
            continue
        snippets.append(
            {
                "language": match.group(1).strip() or "text",
                "code": code,
                "description": _code_description(text, match.start()),
            }
        )
    return snippets


# ---------------------------------------------------------------------------
# Provider clients
# ---------------------------------------------------------------------------


async def _json_or_empty(resp: ClientResponse) -> Dict[str, Any]:
    try:
        body = await resp.json(content_type=None)
    except (ValueError, ClientError):
        return {}
    return body if isinstance(body, dict) else {}


def _upstream_message(body: Dict[str, Any], fallback: Optional[str]) -> str:
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return fallback or "unknown error"


class LLMClient:
    """Base class: one provider, one API key, a shared HTTP session."""

    provider = ""

    def __init__(self, session: ClientSession, api_key: str, model: str) -> None:
        self.session = session
        self.api_key = api_key
        self.model = model

    async def complete(self, prompt: str) -> str:
        raise NotImplementedError

    async def _post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> Dict[str, Any]:
        label = self.provider.capitalize()
        try:
            async with self.session.post(url, json=payload, headers=headers) as resp:
                body = await _json_or_empty(resp)
                if not 200 <= resp.status < 300:
                    raise LLMError(f"{label} API error: {_upstream_message(body, resp.reason)}")
                return body
        except (ClientError, asyncio.TimeoutError) as exc:
            raise LLMError(f"{label} API error: {exc or type(exc).__name__}") from exc


class ClaudeClient(LLMClient):
    provider = "claude"
    API_URL = "https://api.anthropic.com/v1/messages"
    API_VERSION = "2023-06-01"

    def __init__(
        self,
        session: ClientSession,
        api_key: str,
        model: str = "claude-3-sonnet-20240229",
        api_url: str = API_URL,
    ) -> None:
        super().__init__(session, api_key, model)
        self.api_url = api_url

    async def complete(self, prompt: str) -> str:
        body = await self._post(
            self.api_url,
            {
                "model": self.model,
                "max_tokens": MAX_TOKENS,
                "messages": [{"role": "user", "content": prompt}],
            },
            {
                "Content-Type": "application/json",
                "x-api-key": self.api_key,
                "anthropic-version": self.API_VERSION,
            },
        )
        try:
            return body["content"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("Claude API error: unexpected response format") from exc


class GeminiClient(LLMClient):
    provider = "gemini"
    API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        session: ClientSession,
        api_key: str,
        model: str = "gemini-pro",
        api_root: str = API_ROOT,
    ) -> None:
        super().__init__(session, api_key, model)
        self.api_root = api_root.rstrip("/")

    async def complete(self, prompt: str) -> str:
        url = f"{self.api_root}/{self.model}:generateContent"
        body = await self._post(
            url,
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {"maxOutputTokens": MAX_TOKENS, "temperature": 0.2},
            },
            {"Content-Type": "application/json", "x-goog-api-key": self.api_key},
        )
        try:
            return body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise LLMError("Gemini API error: unexpected response format") from exc


PROVIDERS = {"claude": ClaudeClient, "gemini": GeminiClient}


def get_client(provider: str, session: ClientSession, api_key: str, model: Optional[str] = None) -> LLMClient:
    """Instantiate the client for *provider*; raises UnknownProviderError otherwise."""
    try:
        client_cls = PROVIDERS[provider]
    except KeyError:
        raise UnknownProviderError(f"Invalid provider: {provider}") from None
    if model:
        return client_cls(session, api_key, model=model)
    return client_cls(session, api_key)


async def generate_answer(client: LLMClient, query: str, pages: Sequence[SourcePage]) -> AIAnswer:
    """Ask *client* about *query* using *pages* as context."""
    text = await client.complete(build_prompt(query, pages))
    logger.debug("LLM %s answered with %d characters", client.provider, len(text))
    return AIAnswer(
        answer=text,
        source_pages=[page.id for page in pages],
        related_queries=extract_related_queries(text),
        code_snippets=extract_code_snippets(text),
    )
