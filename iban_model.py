"""IBAN value object and the errors raised while parsing one."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from iban_utils import IBAN_PATTERN, is_checksum_valid, normalize_iban


class IbanError(ValueError):
    """Base class for IBAN parsing errors."""


class NullArgumentError(IbanError, TypeError):
    """Raised when a required argument is None."""


class InvalidFormatError(IbanError):
    """Raised when a string does not match the generic IBAN pattern."""


def require_non_null(value: Any, name: str = "argument") -> Any:
    if value is None:
        raise NullArgumentError(f"Precondition failed: non-null {name} required")
    return value


@dataclass(frozen=True)
class Iban:
    """
    A structurally valid IBAN.

    Whitespace is removed and letters are upper-cased before the value is
    matched against ``IBAN_PATTERN``. Equality and hashing use the
    normalized value only, so ``Iban("gb82 west ...")`` equals
    ``Iban("GB82WEST...")``.
    """

    value: str
    raw: str = field(default="", compare=False, repr=False)

    def __init__(self, iban: str) -> None:
        require_non_null(iban, "IBAN")
        if not isinstance(iban, str):
            raise InvalidFormatError(f"IBAN must be a string, got {type(iban).__name__}")

        # str.upper() folds some non-ASCII letters into ASCII ones
        if not iban.isascii():
            raise InvalidFormatError(f"Not a well-formed IBAN: {iban.strip()!r}")

        normalized = normalize_iban(iban)
        if not IBAN_PATTERN.match(normalized):
            raise InvalidFormatError(f"Not a well-formed IBAN: {normalized!r}")

        object.__setattr__(self, "value", normalized)
        object.__setattr__(self, "raw", iban.strip())

    @classmethod
    def parse(cls, iban: str | Iban) -> Iban:
        """Return ``iban`` unchanged if it already is an Iban, else parse it."""
        require_non_null(iban, "IBAN")
        if isinstance(iban, Iban):
            return iban
        return cls(iban)

    @classmethod
    def is_well_formed(cls, iban: str) -> bool:
        require_non_null(iban, "IBAN")
        try:
            cls(iban)
        except InvalidFormatError:
            return False
        return True

    @property
    def country_code(self) -> str:
        return self.value[:2]

    @property
    def check_digits(self) -> str:
        return self.value[2:4]

    @property
    def bban(self) -> str:
        return self.value[4:]

    @property
    def checksum_valid(self) -> bool:
        return is_checksum_valid(self.value)

    @property
    def formatted(self) -> str:
        """Paper format: groups of four characters separated by spaces."""
        return " ".join(self.value[i:i + 4] for i in range(0, len(self.value), 4))

    def __str__(self) -> str:
        return self.value
