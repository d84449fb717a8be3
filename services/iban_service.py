"""IBAN validation service for MCP."""
from __future__ import annotations

from typing import Callable

from fastmcp import FastMCP

from iban_validator import IbanResult, IbanValidator
from mcp_framework import log_interaction


def check_iban(validator: IbanValidator, iban: str) -> IbanResult:
    """Run the validator and log the outcome; errors are logged and re-raised."""

    try:
        result = validator.check(iban)
    except Exception as exc:
        log_interaction(
            "iban_check_error",
            {"iban": iban},
            {"error": str(exc), "type": exc.__class__.__name__},
        )
        raise

    log_interaction("iban_check", {"iban": iban}, result)
    return result


def validate_iban(validator: IbanValidator, iban: str) -> bool:
    try:
        valid = validator.validate(iban)
    except Exception as exc:
        log_interaction(
            "iban_validate_error",
            {"iban": iban},
            {"error": str(exc), "type": exc.__class__.__name__},
        )
        raise

    log_interaction("iban_validate", {"iban": iban}, {"valid": valid})
    return valid


def make_iban_service(validator: IbanValidator) -> Callable[[FastMCP], None]:
    """Build a register function bound to ``validator``."""

    def register_iban_service(mcp: FastMCP) -> None:
        """Register IBAN validation tools on the provided MCP instance."""

        @mcp.tool()
        def iban_check(iban: str) -> IbanResult:
            """
            Validate an IBAN and return a structured result.

            Args:
                iban: IBAN string (can contain spaces, lower/upper case)

            Returns:
                IbanResult: {valid, normalized_iban, country, reason, failed_stage}
            """
            return check_iban(validator, iban)

        @mcp.tool()
        def iban_validate(iban: str) -> bool:
            """Return true if the IBAN is valid; malformed input is an error."""
            return validate_iban(validator, iban)

    return register_iban_service
