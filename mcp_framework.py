"""Helpers for composing the FastMCP server from service definitions."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from fastmcp import FastMCP

logger = logging.getLogger("uvicorn.error")


@dataclass
class ServiceDefinition:
    """A named group of tools registered on a FastMCP instance."""

    name: str
    description: str
    register: Callable[[FastMCP], None]


def _to_jsonable(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump()
    return data


def log_interaction(action: str, input_data: Any, output_data: Any) -> None:
    """Emit one JSON line per interaction on the uvicorn logger.

    Values that are not JSON serializable are logged as their ``str()``.
    """

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "action": action,
        "input": _to_jsonable(input_data),
        "output": _to_jsonable(output_data),
    }

    try:
        serialized = json.dumps(entry, ensure_ascii=False)
    except TypeError:
        serialized = json.dumps(entry, ensure_ascii=False, default=str)

    logger.info(serialized)


def create_mcp_server(
    services: Iterable[ServiceDefinition],
    *,
    app_name: str = "iban-validator",
    json_response: bool = True,
):
    """Create the MCP server, register every service and build its HTTP app."""

    mcp = FastMCP(app_name)

    for service in services:
        service.register(mcp)

    app = mcp.http_app(json_response=json_response)
    return mcp, app
