"""
Parsers for the compound strings found on collected events.

    parse_value                 string property -> bool / number / string
    split_locale                "fr-FR" -> ("fr", "FR")
    string_to_ch_ua             "Brand;1.0|Other;2.0" -> [ChUa, ChUa]
    extract_campaign_parameters "?at_medium=x&at_foo=1" -> Piano src_* values

None of these raise: malformed input degrades to an empty result.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from urllib.parse import parse_qsl

from piano_connector.models import ChUa

logger = logging.getLogger(__name__)

_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

CAMPAIGN_PREFIX = "at_"
PIANO_CAMPAIGN_PREFIX = "src_"


def parse_value(value: str) -> bool | int | float | str:
    """Coerce a free-form string property into the JSON scalar it spells."""
    if value == "true":
        return True
    if value == "false":
        return False
    if _NUMBER_PATTERN.fullmatch(value):
        if _INTEGER_PATTERN.fullmatch(value):
            try:
                return int(value)
            except ValueError:
                # Past the interpreter's int conversion digit limit.
                pass
        number = float(value)
        if math.isfinite(number):
            return number
    return value


def split_locale(locale: str) -> tuple[str, str]:
    """Split a locale tag into (language, region) on its first hyphen.

    A locale without a hyphen is used for both sides.
    """
    if "-" in locale:
        language, region = locale.split("-", 1)
        return language, region
    return locale, locale


def string_to_ch_ua(value: str, full: bool) -> list[ChUa]:
    """Parse a client-hints brand list (``brand;version`` entries joined by ``|``).

    Entries that are not exactly one ``brand;version`` pair are skipped. Unless
    ``full`` is set, versions are cut down to their major component.
    """
    ch_ua_list = []
    for entry in value.split("|"):
        parts = entry.split(";")
        if len(parts) != 2:
            continue
        brand, version = parts
        if not full and "." in version:
            version = version.split(".", 1)[0]
        ch_ua_list.append(ChUa(brand=brand, version=version))
    return ch_ua_list


@dataclass
class CampaignParameters:
    """Piano marketing parameters found in a page's query string."""
    medium: str | None = None
    campaign: str | None = None
    extra_fields: dict = field(default_factory=dict)


def extract_campaign_parameters(search: str) -> CampaignParameters:
    """Collect the ``at_*`` parameters of a raw search string.

    ``at_medium`` and ``at_campaign`` are returned as overrides for the
    structured campaign; every other ``at_*`` key is renamed to ``src_*``.
    """
    params = CampaignParameters()
    query = search[1:] if search.startswith("?") else search
    if not query:
        return params

    try:
        pairs = parse_qsl(query, keep_blank_values=True, errors="strict")
    except ValueError as e:
        logger.debug(f"[Piano] Ignoring malformed search string {search!r}: {e}")
        return params

    for key, value in pairs:
        if not key.startswith(CAMPAIGN_PREFIX):
            continue
        if key == "at_medium":
            params.medium = value
        elif key == "at_campaign":
            params.campaign = value
        else:
            renamed = PIANO_CAMPAIGN_PREFIX + key[len(CAMPAIGN_PREFIX):]
            params.extra_fields[renamed] = parse_value(value)
    return params
