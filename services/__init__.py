"""MCP services exposing the IBAN validator."""

from .iban_service import check_iban, make_iban_service, validate_iban

__all__ = ["check_iban", "make_iban_service", "validate_iban"]
