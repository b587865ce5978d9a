"""
Classification of text recovered from FIS-B generic text products
"""

import re
from dataclasses import dataclass
from typing import Union
from gdl90_errors import FormatError
from metar_parser import METAR, parse_metar
from logger import logger

METAR_MARKER_RE = re.compile(r"METAR\s(.+)")


@dataclass(frozen=True)
class MetarText:
    metar: METAR


@dataclass(frozen=True)
class PirepText:
    pass


@dataclass(frozen=True)
class TafText:
    pass


@dataclass(frozen=True)
class UnknownText:
    text: str


Text = Union[MetarText, PirepText, TafText, UnknownText]


def decode_text(text: str) -> Text:
    """
    Classify recovered text, decoding it structurally where supported
    
    Text that looks like a METAR but fails the grammar falls back to
    UnknownText with the full original string.
    """
    marker = METAR_MARKER_RE.search(text)
    if marker is None:
        return UnknownText(text)
    
    try:
        return MetarText(parse_metar(marker.group(1)))
    except FormatError as e:
        logger.metar(f"Falling back to unknown text: {e}")
        return UnknownText(text)
