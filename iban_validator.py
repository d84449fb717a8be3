"""Validator for IBAN account numbers.

See https://en.wikipedia.org/wiki/International_Bank_Account_Number
"""
from __future__ import annotations

import logging
from typing import Literal, Optional

from pydantic import BaseModel

from iban_model import Iban, InvalidFormatError, require_non_null
from iban_utils import checksum_remainder, normalize_iban
from iban_validation import IbanValidation, ValidationService

logger = logging.getLogger(__name__)

# Shared by every validator that is not given its own service
VALIDATION_SERVICE = ValidationService()

FailedStage = Literal["format", "checksum", "number_validation"]


class IbanResult(BaseModel):
    valid: bool
    normalized_iban: str
    country: Optional[str] = None
    reason: Optional[str] = None
    failed_stage: Optional[FailedStage] = None


def _passes(validation: IbanValidation, iban: Iban) -> bool:
    try:
        return bool(validation.is_valid(iban))
    except Exception:
        logger.warning(
            "%s raised while validating %s; treating as invalid",
            type(validation).__name__,
            iban.country_code,
            exc_info=True,
        )
        return False


def _display_value(iban: object) -> str:
    if not isinstance(iban, str):
        return ""
    return normalize_iban(iban) if iban.isascii() else iban.strip()


def _is_country_code(prefix: str) -> bool:
    return len(prefix) == 2 and prefix.isascii() and prefix.isalpha() and prefix.isupper()


class IbanValidator:
    """
    Validates IBANs: generic pattern, MOD97 checksum and, when
    ``require_number_validation`` is set, every country validation
    registered for the IBAN's country.
    """

    def __init__(
        self,
        require_number_validation: bool = False,
        validation_service: ValidationService | None = None,
    ) -> None:
        self._require_number_validation = bool(require_number_validation)
        self._validation_service = (
            validation_service if validation_service is not None else VALIDATION_SERVICE
        )

    @property
    def require_number_validation(self) -> bool:
        return self._require_number_validation

    @property
    def validation_service(self) -> ValidationService:
        return self._validation_service

    def validate(self, iban: str | Iban) -> bool:
        """
        Return True if ``iban`` is valid.

        Raises NullArgumentError for None and InvalidFormatError if a string
        does not match the generic IBAN pattern. If number validation is
        required and no validation covers the country, returns False; if
        several do, all of them must pass.
        """
        return self._run(Iban.parse(iban)).valid

    def check(self, iban: str | Iban) -> IbanResult:
        """Same pipeline as validate(), reporting which stage failed."""
        require_non_null(iban, "IBAN")
        try:
            parsed = Iban.parse(iban)
        except InvalidFormatError as exc:
            normalized = _display_value(iban)
            prefix = normalized[:2]
            return IbanResult(
                valid=False,
                normalized_iban=normalized,
                country=prefix if _is_country_code(prefix) else None,
                reason=str(exc),
                failed_stage="format",
            )
        return self._run(parsed)

    def _run(self, iban: Iban) -> IbanResult:
        remainder = checksum_remainder(iban.value)
        if remainder != 1:
            logger.debug("MOD97 check failed for %s (remainder=%d)", iban.country_code, remainder)
            return self._result(
                iban,
                f"MOD97 check failed (remainder={remainder}, expected 1).",
                "checksum",
            )

        if not self._require_number_validation:
            return self._result(iban, "IBAN is valid.")

        validations = self._validation_service.get_validations(iban)
        if not validations:
            logger.debug("No account number validation registered for %s", iban.country_code)
            return self._result(
                iban,
                f"No account number validation available for country {iban.country_code}.",
                "number_validation",
            )

        for validation in validations:
            if not _passes(validation, iban):
                return self._result(
                    iban,
                    f"Account number rejected by {type(validation).__name__}.",
                    "number_validation",
                )

        return self._result(iban, "IBAN is valid.")

    @staticmethod
    def _result(iban: Iban, reason: str, failed_stage: FailedStage | None = None) -> IbanResult:
        return IbanResult(
            valid=failed_stage is None,
            normalized_iban=iban.value,
            country=iban.country_code,
            reason=reason,
            failed_stage=failed_stage,
        )
