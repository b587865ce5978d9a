"""
Decoded GDL-90 message variants, including the Stratus/ForeFlight extensions

Each datagram decodes to exactly one of these. Unknown keeps the ID and the
raw body of top-level message types this decoder does not know about.
"""

from dataclasses import dataclass
from typing import Optional, Union
from traffic_report import TrafficReport
from uplink_payload import UplinkPayload

SYNC_BYTE = 0x7E

MSG_HEARTBEAT = 0
MSG_INITIALIZATION = 2
MSG_UPLINK_DATA = 7
MSG_HEIGHT_ABOVE_TERRAIN = 9
MSG_OWNSHIP_REPORT = 10
MSG_OWNSHIP_GEOMETRIC_ALTITUDE = 11
MSG_TRAFFIC_REPORT = 20
MSG_BASIC_REPORT = 30
MSG_LONG_REPORT = 31
MSG_FOREFLIGHT = 101

# Sub-IDs of message 101; no others are defined
SUBMSG_DEVICE_ID = 0
SUBMSG_ATTITUDE = 1


@dataclass(frozen=True)
class Heartbeat:
    status_byte1: int
    status_byte2: int
    timestamp: int
    message_count: int


@dataclass(frozen=True)
class Initialization:
    pass


@dataclass(frozen=True)
class UplinkData:
    time_of_reception_ns: int
    payload: UplinkPayload


@dataclass(frozen=True)
class HeightAboveTerrain:
    pass


@dataclass(frozen=True)
class OwnshipReport:
    report: TrafficReport


@dataclass(frozen=True)
class OwnshipGeometricAltitude:
    altitude_ft: float


@dataclass(frozen=True)
class TrafficReportMessage:
    report: TrafficReport


@dataclass(frozen=True)
class BasicReport:
    pass


@dataclass(frozen=True)
class LongReport:
    pass


@dataclass(frozen=True)
class DeviceId:
    pass


@dataclass(frozen=True)
class Attitude:
    """AHRS data; fields the device flags as invalid are None"""
    roll_deg: Optional[float]
    pitch_deg: Optional[float]
    heading_deg: Optional[float]
    heading_is_true: bool
    ias_kts: Optional[int]
    tas_kts: Optional[int]


@dataclass(frozen=True)
class Unknown:
    id: int
    data: bytes


Message = Union[
    Heartbeat, Initialization, UplinkData, HeightAboveTerrain, OwnshipReport,
    OwnshipGeometricAltitude, TrafficReportMessage, BasicReport, LongReport,
    DeviceId, Attitude, Unknown,
]


def into_traffic_report(message: Message) -> Optional[TrafficReport]:
    """Return the report carried by a traffic report message, otherwise None"""
    if isinstance(message, TrafficReportMessage):
        return message.report
    return None
