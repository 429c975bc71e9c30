"""Azure MCP Gateway - FastAPI Application.

Exposes the tool registry and executor over a single JSON endpoint that
accepts ``tools/list`` and ``tools/call`` requests on any path.
"""

import json
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.config import Settings, get_settings
from shared.logging import get_logger, request_context, setup_logging
from gateway.cors import AccessPolicy, AccessPolicyMiddleware
from gateway.executor import STATUS_MESSAGE, ToolExecutor
from gateway.registry import ToolRegistry
from gateway.router import SERVICE_VERSION, RequestRouter
from providers import CloudProvider, build_provider

logger = get_logger(__name__)

# OPTIONS never reaches the routes; AccessPolicyMiddleware answers it.
ROUTED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def read_body(request: Request) -> Any:
    """Parse the request body as JSON; empty or unparseable bodies become {}."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (ValueError, RecursionError) as e:
        logger.debug("Request body is not JSON", size=len(raw), error_type=type(e).__name__)
        return {}


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[CloudProvider] = None
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings: Application settings (defaults to the cached settings)
        provider: Cloud provider to use instead of the configured one
    """
    settings = settings or get_settings()
    gateway_settings = settings.gateway

    registry = ToolRegistry.from_catalog(gateway_settings.catalog)
    provider = provider or build_provider(settings)
    executor = ToolExecutor(
        registry=registry,
        provider=provider,
        timeout_seconds=gateway_settings.call_timeout_seconds,
        validate_arguments=gateway_settings.validate_arguments,
    )
    router = RequestRouter(
        registry=registry,
        executor=executor,
        status_message=STATUS_MESSAGE if gateway_settings.catalog == "status" else None,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, json_output=settings.environment == "production")
        logger.info(
            "Starting Azure MCP Gateway",
            catalog=gateway_settings.catalog,
            provider=provider.name,
            tool_count=len(registry)
        )

        yield

        logger.info("Shutting down Azure MCP Gateway")
        await provider.close()

    app = FastAPI(
        title="Azure MCP Gateway",
        description="MCP tool gateway for Azure resource management",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.executor = executor
    app.state.router = router

    app.add_middleware(
        AccessPolicyMiddleware,
        policy=AccessPolicy(
            allowed_origins=gateway_settings.allowed_origins,
            open_access=gateway_settings.open_access,
        ),
    )

    @app.api_route("/", methods=ROUTED_METHODS, include_in_schema=False)
    @app.api_route("/{path:path}", methods=ROUTED_METHODS, include_in_schema=False)
    async def handle(request: Request) -> JSONResponse:
        """Route an MCP request regardless of path."""
        with request_context(http_method=request.method, path=request.url.path):
            try:
                body = await read_body(request)
                routed = await router.route(body, request.method)
            except Exception as e:
                # Answered here so AccessPolicyMiddleware still sets the CORS headers.
                logger.error("Unhandled error", error=str(e), exc_info=True)
                return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})
            return JSONResponse(status_code=routed.status_code, content=routed.payload)

    return app


app = create_app()


def main():
    """Run the gateway."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "gateway.main:app",
        host=settings.gateway.host,
        port=settings.gateway.port,
        reload=settings.environment == "development"
    )


if __name__ == "__main__":
    main()
