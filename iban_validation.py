"""Country-specific IBAN validation contract and registry.

Validations are plain objects implementing :class:`IbanValidation`. They
are registered into a :class:`ValidationService` once at startup, either
directly or from ``module:Class`` import paths via :func:`load_validations`.
"""
from __future__ import annotations

import importlib
import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable

from iban_model import Iban, require_non_null

logger = logging.getLogger(__name__)

_COUNTRY_CODE = re.compile(r"[A-Z]{2}")


class IbanValidation(ABC):
    """Decides whether the BBAN of an IBAN is valid for some country."""

    #: Country codes this validation applies to.
    country_codes: Iterable[str] = ()

    @abstractmethod
    def is_valid(self, iban: Iban) -> bool:
        """Return True if the BBAN of ``iban`` passes this validation.

        Must not modify ``iban``. Exceptions raised here are treated as a
        failed validation by :class:`~iban_validator.IbanValidator`.
        """
        ...


class ValidationService:
    """Read-only lookup from country code to registered validations.

    The registry accepts registrations until the first lookup and is frozen
    afterwards.
    """

    def __init__(self, validations: Iterable[IbanValidation] = ()) -> None:
        self._by_country: dict[str, list[IbanValidation]] = {}
        self._frozen = False
        for validation in validations:
            self.register(validation)

    def register(self, validation: IbanValidation) -> None:
        require_non_null(validation, "validation")
        if self._frozen:
            raise RuntimeError("ValidationService is read-only after the first lookup")
        if not isinstance(validation, IbanValidation):
            raise TypeError(f"{validation!r} is not an IbanValidation")

        name = type(validation).__name__
        declared = validation.country_codes
        if isinstance(declared, str):
            raise TypeError(f"{name}.country_codes must be a collection of codes, not a string")

        country_codes = []
        for code in declared:
            # upper() would fold non-ASCII letters into valid codes
            normalized = code.upper() if isinstance(code, str) and code.isascii() else ""
            if not _COUNTRY_CODE.fullmatch(normalized):
                raise ValueError(f"{name} declares invalid country code {code!r}")
            country_codes.append(normalized)
        if not country_codes:
            raise ValueError(f"{name} declares no country codes")

        for code in country_codes:
            self._by_country.setdefault(code, []).append(validation)
        logger.debug("Registered %s for %s", name, ", ".join(country_codes))

    def get_validations(self, iban: Iban) -> tuple[IbanValidation, ...]:
        require_non_null(iban, "IBAN")
        self._frozen = True
        return tuple(self._by_country.get(iban.country_code, ()))

    @property
    def countries(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_country))

    def __len__(self) -> int:
        return sum(len(validations) for validations in self._by_country.values())


def _resolve(path: str) -> object:
    module_name, sep, attr = path.strip().partition(":")
    if not sep or not module_name or not attr:
        raise ImportError(f"Expected 'module:attribute', got {path!r}")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ImportError(f"{module_name!r} has no attribute {attr!r}") from exc


def load_validations(paths: Iterable[str]) -> list[IbanValidation]:
    """Resolve ``module:Class`` paths into validation instances.

    Classes are instantiated without arguments; module-level instances are
    used as they are.
    """
    validations: list[IbanValidation] = []
    for path in paths:
        if not path.strip():
            continue
        target = _resolve(path)
        validation = target() if isinstance(target, type) else target
        if not isinstance(validation, IbanValidation):
            raise TypeError(f"{path!r} does not provide an IbanValidation")
        validations.append(validation)
    return validations
