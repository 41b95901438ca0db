from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..models.fields import CURRENT_ROLE, JD_LINK, NAME, PHONE
from ..models.output_record import ClassificationResult, OutputRecord
from ..models.settings import Settings
from .links import build_message_link, normalize_link
from .phone import get_phone_normalizer
from .template import render_message

"""Record classification and phone deduplication.

Per canonical row, in input order:

1. normalize phone and JD link
2. empty phone -> invalid_phone (and missing_link when the link is empty too)
3. dedupe_by_phone and phone already usable -> dropped from every bucket
4. otherwise render the message, build the deep link -> usable (and
   missing_link when the link is empty)
"""

__all__ = [
    "classify_rows",
]

logger = logging.getLogger(__name__)


def _text(row: Mapping[str, str], key: str) -> str:
    value = row.get(key)
    return "" if value is None else str(value)


def classify_rows(rows: Iterable[Mapping[str, str]], settings: Settings | None = None) -> ClassificationResult:
    """Classify canonical rows into the three bucket views."""
    settings = settings or Settings()
    normalizer = get_phone_normalizer(settings.phone_strategy)

    usable: list[OutputRecord] = []
    missing: list[OutputRecord] = []
    invalid: list[OutputRecord] = []
    seen_phones: set[str] = set()
    duplicates = 0

    for index, row in enumerate(rows, start=1):
        phone = normalizer.normalize(
            row.get(PHONE), settings.country_code, settings.auto_detect_country
        )
        jd_link = normalize_link(row.get(JD_LINK))

        if not phone:
            record = OutputRecord(
                row_number=index,
                name=_text(row, NAME),
                current_role=_text(row, CURRENT_ROLE),
                phone="",
                jd_link=jd_link,
            )
            invalid.append(record)
            if not jd_link:
                missing.append(record)
            continue

        if settings.dedupe_by_phone:
            if phone in seen_phones:
                duplicates += 1
                logger.debug("row=%d duplicate phone=%s dropped", index, phone)
                continue
            seen_phones.add(phone)

        # message sees the normalized phone and link, not the raw cell text
        message = render_message({**row, PHONE: phone, JD_LINK: jd_link}, settings.template)
        record = OutputRecord(
            row_number=index,
            name=_text(row, NAME),
            current_role=_text(row, CURRENT_ROLE),
            phone=phone,
            jd_link=jd_link,
            message=message,
            message_link=build_message_link(phone, message),
        )
        usable.append(record)
        if not jd_link:
            missing.append(record)

    return ClassificationResult(
        usable=tuple(usable),
        missing_link=tuple(missing),
        invalid_phone=tuple(invalid),
        duplicates_dropped=duplicates,
    )
