"""IBAN validation and Swiss QR-bill reference generation (pure functions).

IBAN checks follow ISO 13616 (per-country length + mod-97 == 1). QR references
are 26 digits plus a mod-10 recursive check digit. Nothing here touches I/O;
every function is total over its string input and reports bad input through
IBANValidationResult rather than exceptions.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from app.domain.enums import QRReferenceType

logger = logging.getLogger(__name__)

# Country-specific IBAN lengths (ISO 13616)
IBAN_LENGTHS: dict[str, int] = {
    "AL": 28, "AD": 24, "AT": 20, "AZ": 28, "BH": 22, "BY": 28, "BE": 16, "BA": 20,
    "BR": 29, "BG": 22, "CR": 22, "HR": 21, "CY": 28, "CZ": 24, "DK": 18, "DO": 28,
    "EE": 20, "FO": 18, "FI": 18, "FR": 27, "GE": 22, "DE": 22, "GI": 23, "GR": 27,
    "GL": 18, "GT": 28, "HU": 28, "IS": 26, "IE": 22, "IL": 23, "IT": 27, "JO": 30,
    "KZ": 20, "XK": 20, "KW": 30, "LV": 21, "LB": 28, "LI": 21, "LT": 20, "LU": 20,
    "MK": 19, "MT": 31, "MR": 27, "MU": 30, "MD": 24, "MC": 27, "ME": 22, "NL": 18,
    "NO": 15, "PK": 24, "PS": 29, "PL": 28, "PT": 25, "QA": 29, "RO": 24, "SM": 27,
    "SA": 24, "RS": 22, "SK": 24, "SI": 19, "ES": 24, "SE": 24, "CH": 21, "TN": 24,
    "TR": 26, "UA": 29, "AE": 23, "GB": 22, "VA": 22, "VG": 24,
}

# Some Swiss banks append a letter to the 21-char IBAN; the first 21 chars are the real IBAN.
SWISS_IBAN_LENGTH = 21
SWISS_IBAN_WITH_SUFFIX_LENGTH = 22

QR_IBAN_COUNTRIES = ("CH", "LI")
# Institution id range (IBAN positions 5-6) reserved for QR-IBANs.
QR_IID_MIN = 30
QR_IID_MAX = 31

MIN_IBAN_LENGTH = 5
_CHECKSUM_CHUNK = 7

QR_REFERENCE_BODY_LENGTH = 26
QR_REFERENCE_LENGTH = 27
# Modulo 10 recursive carry table
MOD10_TABLE = (0, 9, 4, 6, 8, 2, 7, 1, 3, 5)

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_QR_REFERENCE_RE = re.compile(rf"[0-9]{{{QR_REFERENCE_LENGTH}}}")


@dataclass(frozen=True)
class IBANPolicy:
    """Per-deployment IBAN rules.

    lenient_checksum_countries: country codes whose IBANs are accepted even when
    mod-97 fails (a warning is logged instead).
    """

    lenient_checksum_countries: frozenset[str] = frozenset(QR_IBAN_COUNTRIES)

    def strict_checksum(self, country_code: str) -> bool:
        return country_code not in self.lenient_checksum_countries


DEFAULT_IBAN_POLICY = IBANPolicy()


@dataclass(frozen=True)
class IBANValidationResult:
    """Outcome of validate_iban. error is set only when is_valid is False."""

    is_valid: bool
    cleaned_iban: str
    formatted_iban: str
    country_code: str
    is_qr_iban: bool
    error: str | None = None


def clean_iban(value: str | None) -> str:
    """Drop every non-ASCII-alphanumeric character and uppercase the rest."""
    if not value:
        return ""
    return _NON_ALNUM_RE.sub("", value).upper()


def _group(value: str, size: int) -> str:
    return " ".join(value[i : i + size] for i in range(0, len(value), size))


def format_iban(value: str | None) -> str:
    """Clean, then insert a space every 4 characters (display only)."""
    return _group(clean_iban(value), 4)


def calculate_checksum(iban: str) -> int:
    """ISO 13616 mod-97 remainder of a cleaned IBAN; a valid IBAN yields 1.

    The numeral string is reduced in 7-digit chunks: remainder-so-far is prefixed
    to the next chunk, parsed, and taken mod 97.
    """
    rearranged = iban[4:] + iban[:4]
    digits = "".join(
        str(ord(ch) - 55) if "A" <= ch <= "Z" else ch for ch in rearranged
    )
    remainder = 0
    for i in range(0, len(digits), _CHECKSUM_CHUNK):
        chunk = f"{remainder}{digits[i : i + _CHECKSUM_CHUNK]}"
        remainder = int(chunk) % 97
    return remainder


def _is_swiss_with_suffix(cleaned: str) -> bool:
    return cleaned.startswith("CH") and len(cleaned) == SWISS_IBAN_WITH_SUFFIX_LENGTH


def is_qr_iban(value: str | None) -> bool:
    """True for CH/LI IBANs whose positions 5-6 fall in the QR-IID range 30-31."""
    cleaned = clean_iban(value)
    if not cleaned.startswith(QR_IBAN_COUNTRIES):
        return False
    iid = cleaned[4:6]
    if not iid.isdigit():
        return False
    return QR_IID_MIN <= int(iid) <= QR_IID_MAX


def _invalid(cleaned: str, country_code: str, error: str) -> IBANValidationResult:
    return IBANValidationResult(
        is_valid=False,
        cleaned_iban=cleaned,
        formatted_iban=format_iban(cleaned),
        country_code=country_code,
        is_qr_iban=False,
        error=error,
    )


def validate_iban(
    value: str | None, policy: IBANPolicy = DEFAULT_IBAN_POLICY
) -> IBANValidationResult:
    """Validate country, length and checksum of an IBAN.

    Swiss IBANs of 22 characters (bank suffix) are accepted and checked on their
    first 21 characters. Checksum failures for countries the policy treats
    leniently are logged and accepted.
    """
    cleaned = clean_iban(value)
    if not cleaned:
        return _invalid("", "", "IBAN is required")
    if len(cleaned) < MIN_IBAN_LENGTH:
        return _invalid(cleaned, "", "IBAN too short")

    country_code = cleaned[:2]
    expected_length = IBAN_LENGTHS.get(country_code)
    with_suffix = _is_swiss_with_suffix(cleaned)
    if with_suffix:
        logger.info("Swiss IBAN with bank suffix accepted: %s", format_iban(cleaned))

    if expected_length is None and not with_suffix:
        return _invalid(cleaned, country_code, f"Unknown country code: {country_code}")
    if not with_suffix and len(cleaned) != expected_length:
        return _invalid(
            cleaned,
            country_code,
            f"Invalid length: expected {expected_length}, got {len(cleaned)}",
        )

    base = cleaned[:SWISS_IBAN_LENGTH] if with_suffix else cleaned
    checksum = calculate_checksum(base)
    if checksum != 1:
        if policy.strict_checksum(country_code):
            return _invalid(cleaned, country_code, "Invalid IBAN checksum")
        logger.warning(
            "IBAN checksum warning for %s: expected 1, got %d. Accepting (lenient country).",
            country_code,
            checksum,
        )

    return IBANValidationResult(
        is_valid=True,
        cleaned_iban=cleaned,
        formatted_iban=format_iban(cleaned),
        country_code=country_code,
        is_qr_iban=is_qr_iban(cleaned),
    )


def get_iban_for_qr(value: str | None) -> str:
    """IBAN to embed in a QR-bill: the 21-char base for suffixed Swiss IBANs, else cleaned."""
    cleaned = clean_iban(value)
    if _is_swiss_with_suffix(cleaned):
        return cleaned[:SWISS_IBAN_LENGTH]
    return cleaned


def get_qr_reference_type(value: str | None) -> QRReferenceType:
    """QRR for QR-IBANs, otherwise NON. SCOR (ISO 11649) is not supported."""
    if is_qr_iban(get_iban_for_qr(value)):
        return QRReferenceType.QRR
    return QRReferenceType.NON


def mod10_recursive_check_digit(digits: str) -> int:
    """Check digit of a digit string using the Swiss mod-10 recursive table."""
    carry = 0
    for ch in digits:
        carry = MOD10_TABLE[(carry + int(ch)) % 10]
    return (10 - carry) % 10


def generate_qr_reference(invoice_number: str | None) -> str:
    """27-digit QR reference from the digits of invoice_number.

    Digits are left-padded with zeros to 26; longer inputs keep their last 26
    digits. An invoice number without digits yields 26 zeros plus check digit.
    """
    digits = _NON_DIGIT_RE.sub("", invoice_number or "")
    body = digits.rjust(QR_REFERENCE_BODY_LENGTH, "0")[-QR_REFERENCE_BODY_LENGTH:]
    return f"{body}{mod10_recursive_check_digit(body)}"


def validate_qr_reference(reference: str | None) -> bool:
    """True if reference (spaces allowed) is 27 digits with a matching check digit."""
    compact = (reference or "").replace(" ", "")
    if not _QR_REFERENCE_RE.fullmatch(compact):
        return False
    body, check = compact[:-1], int(compact[-1])
    return mod10_recursive_check_digit(body) == check


def format_qr_reference(reference: str) -> str:
    """Insert a space every 5 characters (display only)."""
    return _group(reference, 5)
