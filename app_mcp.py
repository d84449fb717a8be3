"""MCP server exposing IBAN validation.

Configuration comes from environment variables:

* ``IBAN_REQUIRE_NUMBER_VALIDATION`` (``1``/``true``/``yes``/``on``; defaults to off)
* ``IBAN_VALIDATIONS`` comma-separated ``module:Class`` paths of country
  validations to register at startup
* ``IBAN_MCP_APP_NAME`` (defaults to ``"iban-validator"``)
"""
from __future__ import annotations

import os

import uvicorn

from iban_validation import load_validations
from iban_validator import VALIDATION_SERVICE, IbanValidator
from mcp_framework import ServiceDefinition, create_mcp_server, log_interaction
from services import make_iban_service


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


REQUIRE_NUMBER_VALIDATION = _env_flag("IBAN_REQUIRE_NUMBER_VALIDATION")
VALIDATION_PATHS = [p for p in os.getenv("IBAN_VALIDATIONS", "").split(",") if p.strip()]
APP_NAME = os.getenv("IBAN_MCP_APP_NAME", "iban-validator")

# Registration must finish before the validator performs its first lookup
for validation in load_validations(VALIDATION_PATHS):
    VALIDATION_SERVICE.register(validation)

validator = IbanValidator(REQUIRE_NUMBER_VALIDATION, VALIDATION_SERVICE)

services = [
    ServiceDefinition(
        name="iban",
        description="Validate IBAN strings and return normalized details.",
        register=make_iban_service(validator),
    ),
]

mcp, http_app = create_mcp_server(services, app_name=APP_NAME, json_response=True)

log_interaction(
    "startup",
    {"services": [service.name for service in services]},
    {
        "app": APP_NAME,
        "require_number_validation": REQUIRE_NUMBER_VALIDATION,
        "countries": list(VALIDATION_SERVICE.countries),
    },
)


if __name__ == "__main__":
    uvicorn.run(
        http_app,
        host=os.getenv("IBAN_MCP_HOST", "127.0.0.1"),
        port=int(os.getenv("IBAN_MCP_PORT", "8000")),
        log_level=os.getenv("IBAN_MCP_LOG_LEVEL", "info").lower(),
    )
