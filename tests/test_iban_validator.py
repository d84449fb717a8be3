from __future__ import annotations

import logging

import pytest

from iban_model import Iban, InvalidFormatError, NullArgumentError
from iban_validation import IbanValidation, ValidationService
from iban_validator import VALIDATION_SERVICE, IbanResult, IbanValidator

VALID_GB = "GB82WEST12345698765432"
BAD_CHECKSUM_GB = "GB81WEST12345698765432"


class Fixed(IbanValidation):
    def __init__(self, result: bool, *countries: str) -> None:
        self.result = result
        self.country_codes = countries or ("GB",)
        self.calls: list[Iban] = []

    def is_valid(self, iban: Iban) -> bool:
        self.calls.append(iban)
        return self.result


class Exploding(IbanValidation):
    country_codes = ("GB",)

    def is_valid(self, iban: Iban) -> bool:
        raise RuntimeError("boom")


class RecordingService(ValidationService):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.lookups = 0

    def get_validations(self, iban: Iban):
        self.lookups += 1
        return super().get_validations(iban)


def test_default_validator_checks_checksum_only() -> None:
    validator = IbanValidator()
    assert validator.require_number_validation is False
    assert validator.validation_service is VALIDATION_SERVICE
    assert validator.validate(VALID_GB) is True
    assert validator.validate(BAD_CHECKSUM_GB) is False


def test_case_and_spacing_do_not_matter() -> None:
    validator = IbanValidator()
    assert validator.validate("gb82west12345698765432") == validator.validate(VALID_GB)
    assert validator.validate("GB82 WEST 1234 5698 7654 32") is True


def test_accepts_iban_instances() -> None:
    assert IbanValidator().validate(Iban(VALID_GB)) is True


def test_none_raises_null_argument() -> None:
    validator = IbanValidator()
    with pytest.raises(NullArgumentError):
        validator.validate(None)  # type: ignore[arg-type]
    with pytest.raises(NullArgumentError):
        validator.check(None)  # type: ignore[arg-type]


def test_malformed_string_raises_invalid_format() -> None:
    with pytest.raises(InvalidFormatError):
        IbanValidator().validate("GB82 WEST")


def test_service_not_consulted_without_number_validation() -> None:
    service = RecordingService([Fixed(False)])
    validator = IbanValidator(False, service)
    assert validator.validate(VALID_GB) is True
    assert validator.validate("DE89370400440532013000") is True
    assert service.lookups == 0


def test_no_registered_validation_fails_when_required() -> None:
    validator = IbanValidator(True, ValidationService())
    assert validator.validate(VALID_GB) is False


def test_all_validations_must_pass() -> None:
    passing = IbanValidator(True, ValidationService([Fixed(True), Fixed(True)]))
    assert passing.validate(VALID_GB) is True

    first_fails = IbanValidator(True, ValidationService([Fixed(False), Fixed(True)]))
    assert first_fails.validate(VALID_GB) is False

    last_fails = IbanValidator(True, ValidationService([Fixed(True), Fixed(False)]))
    assert last_fails.validate(VALID_GB) is False


def test_only_validations_for_the_country_are_used() -> None:
    other = Fixed(False, "DE")
    validator = IbanValidator(True, ValidationService([Fixed(True), other]))
    assert validator.validate(VALID_GB) is True
    assert other.calls == []


def test_checksum_failure_skips_country_validations() -> None:
    validation = Fixed(True)
    validator = IbanValidator(True, ValidationService([validation]))
    assert validator.validate(BAD_CHECKSUM_GB) is False
    assert validation.calls == []


def test_raising_validation_counts_as_failure(caplog: pytest.LogCaptureFixture) -> None:
    validator = IbanValidator(True, ValidationService([Exploding()]))
    with caplog.at_level(logging.WARNING, logger="iban_validator"):
        assert validator.validate(VALID_GB) is False
    assert "Exploding raised" in caplog.text


def test_validate_is_idempotent() -> None:
    validation = Fixed(True)
    validator = IbanValidator(True, ValidationService([validation]))
    iban = Iban(VALID_GB)
    results = {validator.validate(iban) for _ in range(5)}
    assert results == {True}
    assert len(validation.calls) == 5


def test_check_reports_success() -> None:
    result = IbanValidator().check("gb82 west 1234 5698 7654 32")
    assert isinstance(result, IbanResult)
    assert result.valid is True
    assert result.normalized_iban == VALID_GB
    assert result.country == "GB"
    assert result.failed_stage is None


def test_check_reports_format_failure_without_raising() -> None:
    result = IbanValidator().check("gb82 west")
    assert result.valid is False
    assert result.normalized_iban == "GB82WEST"
    assert result.country == "GB"
    assert result.failed_stage == "format"


def test_check_reports_checksum_failure() -> None:
    result = IbanValidator().check(BAD_CHECKSUM_GB)
    assert result.valid is False
    assert result.failed_stage == "checksum"
    assert "remainder" in (result.reason or "")


@pytest.mark.parametrize(
    "validations, expected_reason",
    [
        ([], "No account number validation available"),
        ([Fixed(False)], "rejected by Fixed"),
    ],
)
def test_check_reports_number_validation_failure(validations, expected_reason: str) -> None:
    result = IbanValidator(True, ValidationService(validations)).check(VALID_GB)
    assert result.valid is False
    assert result.failed_stage == "number_validation"
    assert expected_reason in (result.reason or "")


@pytest.mark.parametrize(
    "iban",
    [VALID_GB, BAD_CHECKSUM_GB, "DE89370400440532013000", "NL91ABNA0417164301"],
)
def test_check_and_validate_agree(iban: str) -> None:
    validator = IbanValidator(True, ValidationService([Fixed(True, "GB", "NL")]))
    assert validator.check(iban).valid is validator.validate(iban)


def test_check_format_failure_omits_non_letter_country() -> None:
    result = IbanValidator().check("12")
    assert result.failed_stage == "format"
    assert result.normalized_iban == "12"
    assert result.country is None


def test_check_format_failure_keeps_non_ascii_input_unfolded() -> None:
    result = IbanValidator().check("gb82weſt12345698765432")
    assert result.failed_stage == "format"
    assert result.normalized_iban == "gb82weſt12345698765432"
    assert result.country is None


def test_configuration_is_read_only() -> None:
    service = ValidationService()
    validator = IbanValidator(True, service)
    assert validator.require_number_validation is True
    assert validator.validation_service is service
    with pytest.raises(AttributeError):
        validator.require_number_validation = False  # type: ignore[misc]
    with pytest.raises(AttributeError):
        validator.validation_service = ValidationService()  # type: ignore[misc]


def test_required_validation_passes_for_registered_country() -> None:
    validator = IbanValidator(True, ValidationService([Fixed(True, "fi")]))
    assert validator.validate("FI21 1234 5600 0007 85") is True
