"""
METAR decoder for text recovered from FIS-B uplinks

The grammar is one regular expression built from a fixed sequence of groups.
Only the station and observation time are mandatory; every later group may
be missing without failing the decode.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
from gdl90_errors import FormatError
from logger import logger


# Mandatory: station, day, hour, minute
STATION_AND_TIME = r"(?P<station>\S{4})\s(?P<day>\d{2})(?P<hour>\d{2})(?P<minute>\d{2})Z"

REPORT_MODIFIER = r"(?P<modifier>\sAUTO|\sCOR)?"

# The variable-direction suffix (e.g. 180V240) is matched but not decoded
WIND_GROUP = (r"(\s(?P<wind_dir>\d{3}|VRB)(?P<wind_speed>\d{2,3})G?(?P<wind_gust>\d{2,3})?KT"
              r"(?P<wind_variable>\s\d{3}V\d{3})?)?")

VISIBILITY_GROUP = r"(\s(?P<visibility>.{1,5})SM)?"

RUNWAY_VISUAL_RANGE_GROUP = r"(\sR\d{2}[LRC]?/[PM]?\d{4}(V\d{4})?FT)?"

PRESENT_WEATHER_GROUP = (r"(\s(\+|-|VC)?(MI|PR|BC|DR|BL|SH|TS|FZ)?"
                         r"(DZ|RA|SN|SG|IC|PL|GR|GS|UP|BR|FG|FU|VA|DU|SA|HZ|PY|PO|SQ|FC|SS|DS))?")

# No limit in the format itself; four is the most seen in practice
SKY_CONDITION_GROUP = r"(\s(?P<sky{n}>\D{{3}}\d{{3}}|VV\d{{3}}|CLR|SKC))?"
MAX_SKY_CONDITIONS = 4

TEMPERATURE_GROUP = r"(\s(?P<temperature>M?\d{2})/(?P<dew_point>M?\d{2}))?"

ALTIMETER_GROUP = r"(\sA(?P<altimeter>\d{4}))?"

METAR_RE = re.compile(
    STATION_AND_TIME + REPORT_MODIFIER + WIND_GROUP + VISIBILITY_GROUP
    + RUNWAY_VISUAL_RANGE_GROUP
    + PRESENT_WEATHER_GROUP * 3
    + ''.join(SKY_CONDITION_GROUP.format(n=n) for n in range(MAX_SKY_CONDITIONS))
    + TEMPERATURE_GROUP + ALTIMETER_GROUP
)

# Wind direction reported for "VRB"; not a real bearing
VARIABLE_WIND_DIR_DEG = 0.0


class QualityControlFlag(Enum):
    CORRECTED = 'COR'
    AUTOMATED = 'AUTO'


@dataclass(frozen=True)
class METAR:
    """A decoded routine weather report"""
    station: str
    day: int
    hour: int
    minute: int
    quality_control_flags: Tuple[QualityControlFlag, ...] = ()
    wind_dir_deg: Optional[float] = None
    wind_speed_kts: Optional[float] = None
    wind_gust_kts: Optional[float] = None
    temperature_c: Optional[int] = None
    dew_point_c: Optional[int] = None
    altimeter_inhg: Optional[float] = None
    visibility_sm: Optional[str] = None
    sky_condition: Tuple[str, ...] = field(default_factory=tuple)


def _signed_celsius(group: Optional[str]) -> Optional[int]:
    if group is None:
        return None
    if group.startswith('M'):
        return -int(group[1:])
    return int(group)


def _optional_float(group: Optional[str]) -> Optional[float]:
    return float(group) if group is not None else None


def parse_metar(text: str) -> METAR:
    """
    Decode the body of a METAR (the text following the "METAR" keyword)
    
    Args:
        text: Report text starting at the station identifier
        
    Returns:
        Decoded METAR
        
    Raises:
        FormatError: If the station/time prefix cannot be found
    """
    match = METAR_RE.search(text)
    if match is None:
        raise FormatError('metar', f"no station/time group in {text!r}")
    
    groups = match.groupdict()
    logger.metar(f"Matched {match.group(0)!r}")
    
    flags: List[QualityControlFlag] = []
    if groups['modifier'] is not None:
        flags.append(QualityControlFlag(groups['modifier'].strip()))
    
    wind_dir = groups['wind_dir']
    if wind_dir == 'VRB':
        wind_dir_deg = VARIABLE_WIND_DIR_DEG
    else:
        wind_dir_deg = _optional_float(wind_dir)
    
    altimeter = groups['altimeter']
    sky_condition = tuple(groups[f'sky{n}'] for n in range(MAX_SKY_CONDITIONS)
                          if groups[f'sky{n}'] is not None)
    
    return METAR(
        station=groups['station'],
        day=int(groups['day']),
        hour=int(groups['hour']),
        minute=int(groups['minute']),
        quality_control_flags=tuple(flags),
        wind_dir_deg=wind_dir_deg,
        wind_speed_kts=_optional_float(groups['wind_speed']),
        wind_gust_kts=_optional_float(groups['wind_gust']),
        temperature_c=_signed_celsius(groups['temperature']),
        dew_point_c=_signed_celsius(groups['dew_point']),
        altimeter_inhg=int(altimeter) / 100.0 if altimeter is not None else None,
        visibility_sm=groups['visibility'],
        sky_condition=sky_condition,
    )
