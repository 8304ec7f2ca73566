"""Pass-through API routes: LLM completions, client config, health."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from relay import config
from relay.middleware.rate_limit import RateLimitDependency, api_limiter
from relay.models.health import HealthResponse, StatusResponse
from relay.services.llm_proxy import LLMInvalidResponseError, LLMNotConfiguredError, llm_proxy

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])

rate_limited = RateLimitDependency(api_limiter)


@router.post("/llm/chat/completions", dependencies=[Depends(rate_limited)])
async def chat_completions(body: dict[str, Any] = Body(...)) -> Any:
    """
    Forward a chat completion request to the configured LLM provider.

    Upstream error statuses and bodies are relayed as-is.
    """
    try:
        return await llm_proxy.chat_completions(body)
    except LLMNotConfiguredError as e:
        logger.error("LLM request rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="LLM API key is not configured.",
        ) from e
    except LLMInvalidResponseError as e:
        logger.error("LLM upstream returned non-JSON body status=%s", e.status_code)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": {"message": e.text}, "timestamp": datetime.now(UTC).isoformat()},
        )
    except httpx.HTTPStatusError as e:
        logger.error("LLM upstream error status=%s", e.response.status_code)
        try:
            upstream = e.response.json()
        except ValueError:
            upstream = {"message": e.response.text}
        return JSONResponse(
            status_code=e.response.status_code,
            content={"error": upstream, "timestamp": datetime.now(UTC).isoformat()},
        )
    except httpx.HTTPError as e:
        logger.error("LLM upstream unreachable: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="LLM provider is unreachable. Please try again.",
        ) from e


@router.get("/client-config", dependencies=[Depends(rate_limited)])
async def client_config() -> dict[str, str]:
    """Public client configuration. Fails if any value is missing."""
    values = config.settings.CLIENT_CONFIG
    missing = [name for name, value in values.items() if not value]
    if missing:
        logger.warning("Client config incomplete, missing=%s", missing)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Client config incomplete.",
        )
    return {name: value for name, value in values.items() if value}


@router.get("/health")
async def health() -> HealthResponse:
    """Health check endpoint for uptime monitoring."""
    return HealthResponse(environment=config.settings.ENVIRONMENT, timestamp=datetime.now(UTC))


@router.get("/status")
async def server_status() -> StatusResponse:
    return StatusResponse(
        llm_api_key_set=llm_proxy.configured,
        environment=config.settings.ENVIRONMENT,
    )
