# iban_utils.py
import re

# Structural IBAN pattern: country code, check digits, 11-30 character BBAN
IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{11,30}$")

# Digits folded into the running remainder per step
_CHUNK_SIZE = 9


def normalize_iban(iban: str) -> str:
    """Remove all whitespace and make upper-case."""
    return re.sub(r"\s+", "", iban).upper()


def iban_to_numeric(iban: str) -> str:
    """
    Convert IBAN letters to numbers (A=10 ... Z=35) for MOD97 check.
    """
    result = []
    for ch in iban:
        if "0" <= ch <= "9":
            result.append(ch)
        elif "A" <= ch <= "Z":
            result.append(str(ord(ch) - 55))  # A -> 10, B -> 11, ...
        else:
            raise ValueError(f"Invalid character in IBAN: {ch!r}")
    return "".join(result)


def iban_mod97(numeric_iban: str) -> int:
    """
    Compute numeric_iban % 97 in chunks, carrying the remainder forward.
    numeric_iban must be a non-empty string of digits.
    """
    if not numeric_iban.isdigit():
        raise ValueError(f"Expected a digit string, got {numeric_iban!r}")

    remainder = 0
    for start in range(0, len(numeric_iban), _CHUNK_SIZE):
        chunk = numeric_iban[start:start + _CHUNK_SIZE]
        remainder = int(f"{remainder}{chunk}") % 97
    return remainder


def rearrange_iban(iban: str) -> str:
    """Move country code and check digits to the end."""
    return iban[4:] + iban[:4]


def checksum_remainder(iban: str) -> int:
    """MOD97 remainder of a normalized IBAN; 1 means the checksum holds."""
    return iban_mod97(iban_to_numeric(rearrange_iban(iban)))


def is_checksum_valid(iban: str) -> bool:
    return checksum_remainder(iban) == 1


def compute_check_digits(country_code: str, bban: str) -> str:
    """
    Return the two check digits that make country_code + digits + bban valid.
    """
    country_code = normalize_iban(country_code)
    bban = normalize_iban(bban)
    remainder = iban_mod97(iban_to_numeric(bban + country_code + "00"))
    return f"{98 - remainder:02d}"
