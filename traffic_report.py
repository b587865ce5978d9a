"""
Traffic and ownship report decoding (GDL-90 messages 10 and 20)

Also provides the dead-reckoning and separation helpers used by consumers
of decoded reports.
"""

import dataclasses
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from geopy.distance import great_circle
from byte_reader import ByteReader

# Degrees per LSB of the 24-bit signed lat/lon fields (180 / 2^23)
LAT_LON_SCALE = 2.1457672119140625e-05

EARTH_RADIUS_KM = 6371.0
FEET_PER_NM = 6076.12


class EmitterCategory(Enum):
    NOT_AVAILABLE = 0
    LIGHT = 1
    SMALL = 2
    LARGE = 3
    HIGH_VORTEX_LARGE = 4
    HEAVY = 5
    HIGHLY_MANEUVERABLE = 6
    ROTORCRAFT = 7
    GLIDER_OR_SAILPLANE = 9
    LIGHTER_THAN_AIR = 10
    PARACHUTIST = 11
    ULTRALIGHT = 12
    UNMANNED_AERIAL_VEHICLE = 14
    SPACE_OR_TRANSATMOSPHERIC = 15
    SURFACE_EMERGENCY_VEHICLE = 17
    SURFACE_SERVICE_VEHICLE = 18
    POINT_OBSTACLE = 19
    CLUSTER_OBSTACLE = 20
    LINE_OBSTACLE = 21
    RESERVED_OR_UNASSIGNED = -1
    
    @classmethod
    def from_code(cls, code: int) -> 'EmitterCategory':
        """Map a wire code, sending unassigned codes to RESERVED_OR_UNASSIGNED"""
        try:
            return cls(code)
        except ValueError:
            return cls.RESERVED_OR_UNASSIGNED


@dataclass(frozen=True)
class TrafficReport:
    """
    Position report for one participant (or for ownship)
    
    recv_time is assigned when the report is decoded; it is not wire data.
    """
    status_byte: int
    participant_address: int
    latitude_deg: float
    longitude_deg: float
    pres_altitude_ft: float
    nav_integrity_category: int
    nav_accuracy_category_for_position: int
    horz_velocity_kts: float
    vert_velocity_fpm: float
    track_heading_deg: float
    emitter_category: EmitterCategory
    callsign: str
    recv_time: datetime
    
    def project(self, dt_sec: float) -> 'TrafficReport':
        """
        Dead-reckon the report forward along its track
        
        Args:
            dt_sec: Seconds to project (negative projects backwards)
            
        Returns:
            A new TrafficReport; this one is left unchanged
        """
        distance_nm = self.horz_velocity_kts * (dt_sec / 3600.0)
        destination = great_circle(nautical=distance_nm, radius=EARTH_RADIUS_KM).destination(
            (self.latitude_deg, self.longitude_deg), self.track_heading_deg)
        
        return dataclasses.replace(
            self,
            latitude_deg=destination.latitude,
            longitude_deg=destination.longitude,
            pres_altitude_ft=self.pres_altitude_ft + self.vert_velocity_fpm * (dt_sec / 60.0),
        )
    
    def distance_nm_to(self, other: 'TrafficReport') -> float:
        """Slant distance in nautical miles, pressure altitude difference included"""
        dist_h = lat_lon_dist_nm(self.latitude_deg, self.longitude_deg,
                                 other.latitude_deg, other.longitude_deg)
        dist_v = (other.pres_altitude_ft - self.pres_altitude_ft) / FEET_PER_NM
        return math.sqrt(dist_h ** 2 + dist_v ** 2)


def lat_lon_dist_nm(lat1_deg: float, lon1_deg: float, lat2_deg: float, lon2_deg: float) -> float:
    """Great-circle distance between two points in nautical miles"""
    return great_circle((lat1_deg, lon1_deg), (lat2_deg, lon2_deg), radius=EARTH_RADIUS_KM).nautical


def decode_vertical_velocity(velocity_raw: int) -> float:
    """
    Decode the 12-bit vertical velocity field (low bits of the velocity word)
    
    Bit 11 clear means climbing: magnitude x 64 fpm. Set means descending,
    with the low 11 bits stored inverted.
    """
    magnitude = velocity_raw & 0x7FF
    if velocity_raw & 0x800 == 0:
        return magnitude * 64.0
    return (magnitude ^ 0x7FF) * -64.0


def decode_callsign(raw: bytes) -> str:
    return ''.join(chr(b) for b in raw if b not in (0x00, 0x20))


def decode_traffic_report(data: bytes) -> TrafficReport:
    """
    Decode a traffic or ownship report body
    
    Args:
        data: Message body following the message ID
        
    Returns:
        TrafficReport stamped with the current UTC time
        
    Raises:
        FormatError: If the body ends before the callsign is complete
    """
    reader = ByteReader(data)
    status_byte = reader.read_u8('status')
    participant_address = reader.read_u24('participant address')
    latitude_deg = reader.read_i24('latitude') * LAT_LON_SCALE
    longitude_deg = reader.read_i24('longitude') * LAT_LON_SCALE
    
    # Low nibble holds the miscellaneous indicators
    altitude_misc = reader.read_u16('altitude')
    pres_altitude_ft = (altitude_misc >> 4) * 25.0 - 1000.0
    
    nic_nacp = reader.read_u8('NIC/NACp')
    
    velocity_raw = reader.read_u24('velocity')
    horz_velocity_kts = float(velocity_raw >> 12)
    vert_velocity_fpm = decode_vertical_velocity(velocity_raw)
    
    track_heading_deg = reader.read_u8('track heading') * (360.0 / 256.0)
    emitter_category = EmitterCategory.from_code(reader.read_u8('emitter category'))
    callsign = decode_callsign(reader.read_bytes(8, 'callsign'))
    
    return TrafficReport(
        status_byte=status_byte,
        participant_address=participant_address,
        latitude_deg=latitude_deg,
        longitude_deg=longitude_deg,
        pres_altitude_ft=pres_altitude_ft,
        nav_integrity_category=nic_nacp >> 4,
        nav_accuracy_category_for_position=nic_nacp & 0x0F,
        horz_velocity_kts=horz_velocity_kts,
        vert_velocity_fpm=vert_velocity_fpm,
        track_heading_deg=track_heading_deg,
        emitter_category=emitter_category,
        callsign=callsign,
        recv_time=datetime.now(timezone.utc),
    )
