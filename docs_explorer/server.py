# File: docs_explorer/server.py
"""docs_explorer.server: aiohttp JSON API for documentation stats, search and AI answers.

Routes
------
``GET  /api/docs/stats``      pages and scrape time per source
``POST /api/docs/search``     ``{query, type, sources}`` → ranked results
``POST /api/docs/ai-answer``  ``{query, type, provider, topResults}`` + ``X-API-Key`` header
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Dict, List, Optional

import aiohttp_cors
from aiohttp import ClientSession, ClientTimeout, web

from docs_explorer.config import AppConfig
from docs_explorer.errors import LLMError, UnknownProviderError
from docs_explorer.logger import get_logger
from docs_explorer.search.cache import DocCache
from docs_explorer.search.llm import LLMClient, SourcePage, generate_answer, get_client
from docs_explorer.search.search import search_documentation

__all__ = ["create_app", "run_server", "CACHE_KEY", "CONFIG_KEY", "CLIENT_FACTORY_KEY"]

logger = get_logger("server")

ClientFactory = Callable[[str, ClientSession, str, Optional[str]], LLMClient]

CONFIG_KEY = web.AppKey("config", AppConfig)
CACHE_KEY = web.AppKey("cache", DocCache)
SESSION_KEY = web.AppKey("session", ClientSession)
CLIENT_FACTORY_KEY = web.AppKey("client_factory", object)

AI_CONTEXT_PAGES = 3
CORS_ALLOW_HEADERS = ("Content-Type", "X-API-Key")
CORS_ALLOW_METHODS = ("GET", "POST")


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _json_body(request: web.Request) -> Optional[Dict[str, Any]]:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _string_list(value: Any) -> Optional[List[str]]:
    """A single name or a list of names as a list; ``None`` for anything else."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


# ---------------------------------------------------------------------------
# Middlewares and CORS
# ---------------------------------------------------------------------------


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return _error(500, "Internal server error")


def setup_cors(app: web.Application, origins: List[str]) -> aiohttp_cors.CorsConfig:
    """Enable CORS on every registered route for the configured origins.

    Preflights are answered only for known routes and methods; the
    ``Access-Control-Allow-Origin`` header is set for allowed origins only.
    """
    options = aiohttp_cors.ResourceOptions(
        allow_credentials=False,
        allow_headers=CORS_ALLOW_HEADERS,
        allow_methods=CORS_ALLOW_METHODS,
    )
    cors = aiohttp_cors.setup(app, defaults={origin: options for origin in origins})
    for route in list(app.router.routes()):
        cors.add(route)
    return cors


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def handle_stats(request: web.Request) -> web.Response:
    cache = request.app[CACHE_KEY]
    sources: Dict[str, Dict[str, Any]] = {}
    for key in cache.sources:
        docs = cache.load(key)
        if docs:
            metadata = docs.get("metadata") or {}
            sources[key] = {
                "name": metadata.get("source") or key,
                "pagesScraped": metadata.get("totalPages") or len(docs.get("pages") or {}),
                "lastUpdated": metadata.get("scrapedAt"),
            }
        else:
            sources[key] = {"name": key, "pagesScraped": 0, "available": False}
    return web.json_response({"sources": sources})


async def handle_search(request: web.Request) -> web.Response:
    body = await _json_body(request)
    if body is None:
        return _error(400, "Request body must be a JSON object")
    query = body.get("query")
    if not query:
        return _error(400, "Query is required")

    sources = _string_list(body.get("sources") or ["factory"])
    if sources is None:
        return _error(400, "sources must be a source name or a list of source names")

    server_cfg = request.app[CONFIG_KEY].server
    results = search_documentation(
        str(query),
        body.get("type") or "all",
        sources,
        cache=request.app[CACHE_KEY],
        limit=server_cfg.max_results,
        min_score=server_cfg.min_score,
    )
    return web.json_response([r.to_dict() for r in results])


async def handle_ai_answer(request: web.Request) -> web.Response:
    body = await _json_body(request)
    if body is None:
        return _error(400, "Request body must be a JSON object")
    api_key = request.headers.get("X-API-Key")
    if not api_key:
        return _error(401, "API key is required")
    query = body.get("query")
    if not query:
        return _error(400, "Query is required")

    cache = request.app[CACHE_KEY]
    server_cfg = request.app[CONFIG_KEY].server
    provider = body.get("provider") or "claude"

    page_ids = _string_list(body.get("topResults") or [])
    if page_ids is None:
        return _error(400, "topResults must be a list of page ids")
    if not page_ids:
        found = search_documentation(
            str(query),
            body.get("type") or "all",
            cache.sources,
            cache=cache,
            limit=server_cfg.max_results,
            min_score=server_cfg.min_score,
        )
        page_ids = [r.page["id"] for r in found[:AI_CONTEXT_PAGES]]

    pages: List[SourcePage] = []
    for source in cache.sources:
        docs = cache.load(source)
        if not docs or not docs.get("pages"):
            continue
        for page_id in page_ids:
            page = docs["pages"].get(page_id)
            if page:
                pages.append(
                    SourcePage(
                        id=page_id,
                        title=page.get("title", ""),
                        url=page_id,
                        content=page.get("content", ""),
                        source=source,
                    )
                )

    if not pages:
        return _error(404, "No relevant documentation found")

    model = server_cfg.claude_model if provider == "claude" else server_cfg.gemini_model
    try:
        client = request.app[CLIENT_FACTORY_KEY](provider, request.app[SESSION_KEY], api_key, model)
    except UnknownProviderError:
        return _error(400, "Invalid provider")

    try:
        answer = await generate_answer(client, str(query), pages)
    except LLMError as exc:
        logger.error("Error generating AI response: %s", exc)
        return _error(500, f"Failed to generate AI response: {exc}")
    return web.json_response(answer.to_dict())


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    config: AppConfig,
    cache: Optional[DocCache] = None,
    client_factory: ClientFactory = get_client,
) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[CONFIG_KEY] = config
    app[CACHE_KEY] = cache or DocCache(config.data_dir, config.sources, ttl=config.server.cache_ttl)
    app[CLIENT_FACTORY_KEY] = client_factory

    async def http_session(app: web.Application) -> AsyncIterator[None]:
        session = ClientSession(timeout=ClientTimeout(total=config.server.llm_timeout))
        app[SESSION_KEY] = session
        yield
        await session.close()

    app.cleanup_ctx.append(http_session)

    app.router.add_get("/api/docs/stats", handle_stats)
    app.router.add_post("/api/docs/search", handle_search)
    app.router.add_post("/api/docs/ai-answer", handle_ai_answer)
    setup_cors(app, config.server.cors_origins)
    return app


def run_server(config: AppConfig, host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Blocking: serve the API until interrupted."""
    host = host or config.server.host
    port = port or config.server.port
    logger.info("Documentation Explorer API available at http://%s:%s/api/docs", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
