from __future__ import annotations

import logging
import re
from typing import Any

import phonenumbers
from phonenumbers import NumberParseException

from ..models.settings import DEFAULT_COUNTRY_CODE, PHONE_STRATEGIES

"""Phone normalization.

NormalizedPhone contract: digits only, country code (1-3 digits) followed by
the last 10 significant digits of the source, no leading "+". Empty string
means the value could not be normalized.

Two interchangeable strategies:
- DigitHeuristicNormalizer: strip to digits, keep the last 10, prefix a
  detected or configured country code. Always available.
- PhoneGrammarNormalizer: parse with ``phonenumbers`` using the configured
  country as region hint; anything the parser rejects (or a national number
  that is not exactly 10 digits) falls back to the heuristic.
"""

__all__ = [
    "PhoneNormalizer",
    "DigitHeuristicNormalizer",
    "PhoneGrammarNormalizer",
    "get_phone_normalizer",
    "normalize_phone",
    "clean_country_code",
]

logger = logging.getLogger(__name__)

LOCAL_DIGITS = 10
_NON_DIGIT = re.compile(r"\D+")


def _digits(value: Any) -> str:
    return _NON_DIGIT.sub("", str(value))


def clean_country_code(country_code: Any) -> str:
    """Digit-strip ``country_code``; blank or non numeric -> default "91"."""
    cc = _digits(country_code) if country_code is not None else ""
    return cc or DEFAULT_COUNTRY_CODE


class PhoneNormalizer:
    """Strategy interface: raw phone value -> NormalizedPhone."""

    name = "base"

    def normalize(self, raw: Any, country_code: Any = DEFAULT_COUNTRY_CODE, auto_detect: bool = True) -> str:
        raise NotImplementedError


class DigitHeuristicNormalizer(PhoneNormalizer):
    name = "heuristic"

    def normalize(self, raw: Any, country_code: Any = DEFAULT_COUNTRY_CODE, auto_detect: bool = True) -> str:
        if not raw:
            return ""
        digits = _digits(raw)
        if len(digits) < LOCAL_DIGITS:
            return ""
        local = digits[-LOCAL_DIGITS:]
        if auto_detect and len(digits) > LOCAL_DIGITS:
            return f"{digits[:-LOCAL_DIGITS]}{local}"
        return f"{clean_country_code(country_code)}{local}"


class PhoneGrammarNormalizer(PhoneNormalizer):
    name = "strict"

    def __init__(self, fallback: PhoneNormalizer | None = None) -> None:
        self.fallback = fallback or DigitHeuristicNormalizer()

    def normalize(self, raw: Any, country_code: Any = DEFAULT_COUNTRY_CODE, auto_detect: bool = True) -> str:
        if not raw:
            return ""
        cc = clean_country_code(country_code)
        text = str(raw).strip()
        region = phonenumbers.region_code_for_country_code(int(cc))
        if region == phonenumbers.UNKNOWN_REGION:
            region = None
        try:
            parsed = phonenumbers.parse(text, region)
        except NumberParseException:
            logger.debug("phonenumbers.parse failed for %r -> heuristic", text)
            return self.fallback.normalize(raw, country_code, auto_detect)
        if not phonenumbers.is_valid_number(parsed):
            return self.fallback.normalize(raw, country_code, auto_detect)
        national = str(parsed.national_number)
        if len(national) != LOCAL_DIGITS:
            return self.fallback.normalize(raw, country_code, auto_detect)
        prefix = str(parsed.country_code) if auto_detect else cc
        return f"{prefix}{national}"


_STRATEGIES: dict[str, type[PhoneNormalizer]] = {
    DigitHeuristicNormalizer.name: DigitHeuristicNormalizer,
    PhoneGrammarNormalizer.name: PhoneGrammarNormalizer,
}


def get_phone_normalizer(strategy: str = "heuristic") -> PhoneNormalizer:
    try:
        return _STRATEGIES[strategy]()
    except KeyError:
        raise ValueError(
            f"unknown phone strategy: {strategy!r} (expected one of {', '.join(PHONE_STRATEGIES)})"
        ) from None


def normalize_phone(
    raw: Any,
    country_code: Any = DEFAULT_COUNTRY_CODE,
    auto_detect: bool = True,
    strategy: str = "heuristic",
) -> str:
    return get_phone_normalizer(strategy).normalize(raw, country_code, auto_detect)
