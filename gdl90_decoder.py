"""
GDL-90 message dispatcher

decode_message() turns one datagram into one Message. It keeps no state, so
independent datagrams can be decoded from any number of threads at once.
GDL90Decoder wraps it with per-instance statistics and logging.
"""

from typing import Callable, Dict
from byte_reader import ByteReader
from gdl90_errors import FormatError, UnsupportedError
from gdl90_messages import (
    SYNC_BYTE, MSG_HEARTBEAT, MSG_INITIALIZATION, MSG_UPLINK_DATA,
    MSG_HEIGHT_ABOVE_TERRAIN, MSG_OWNSHIP_REPORT, MSG_OWNSHIP_GEOMETRIC_ALTITUDE,
    MSG_TRAFFIC_REPORT, MSG_BASIC_REPORT, MSG_LONG_REPORT, MSG_FOREFLIGHT,
    SUBMSG_DEVICE_ID, SUBMSG_ATTITUDE,
    Message, Heartbeat, Initialization, UplinkData, HeightAboveTerrain,
    OwnshipReport, OwnshipGeometricAltitude, TrafficReportMessage, BasicReport,
    LongReport, DeviceId, Attitude, Unknown,
)
from traffic_report import decode_traffic_report
from uplink_payload import decode_uplink_payload
from logger import logger

# Time of reception counts in 80 ns steps
TIME_OF_RECEPTION_NS_PER_LSB = 80

ATTITUDE_ANGLE_LIMIT = 1800
INVALID_WORD = 0xFFFF


def _decode_heartbeat(body: bytes) -> Heartbeat:
    reader = ByteReader(body)
    return Heartbeat(
        status_byte1=reader.read_u8('heartbeat status byte 1'),
        status_byte2=reader.read_u8('heartbeat status byte 2'),
        timestamp=reader.read_u16le('heartbeat timestamp'),
        message_count=reader.read_u16('heartbeat message count'),
    )


def _decode_uplink_data(body: bytes) -> UplinkData:
    reader = ByteReader(body)
    tor = reader.read_bytes(3, 'time of reception')
    time_of_reception_raw = tor[0] | (tor[1] << 8) | (tor[2] << 16)
    payload = decode_uplink_payload(reader.read_rest())
    return UplinkData(time_of_reception_raw * TIME_OF_RECEPTION_NS_PER_LSB, payload)


def _decode_geometric_altitude(body: bytes) -> OwnshipGeometricAltitude:
    altitude_raw = ByteReader(body).read_i16('geometric altitude')
    return OwnshipGeometricAltitude(altitude_raw * 5.0)


def _attitude_angle(raw: int):
    if raw < -ATTITUDE_ANGLE_LIMIT or raw > ATTITUDE_ANGLE_LIMIT:
        return None
    return raw * 0.1


def _decode_attitude(reader: ByteReader) -> Attitude:
    roll_raw = reader.read_i16('attitude roll')
    pitch_raw = reader.read_i16('attitude pitch')
    heading_raw = reader.read_u16('attitude heading')
    ias_raw = reader.read_u16('attitude indicated airspeed')
    tas_raw = reader.read_u16('attitude true airspeed')
    
    # Bit 15 selects true/magnetic, the low 15 bits are a signed tenth of a degree
    heading_deg = None
    if heading_raw != INVALID_WORD:
        heading_tenths = heading_raw & 0x7FFF
        if heading_tenths & 0x4000:
            heading_tenths -= 0x8000
        heading_deg = heading_tenths * 0.1
    
    return Attitude(
        roll_deg=_attitude_angle(roll_raw),
        pitch_deg=_attitude_angle(pitch_raw),
        heading_deg=heading_deg,
        heading_is_true=heading_raw & 0x8000 == 0,
        ias_kts=None if ias_raw == INVALID_WORD else ias_raw,
        tas_kts=None if tas_raw == INVALID_WORD else tas_raw,
    )


def _decode_foreflight(body: bytes) -> Message:
    reader = ByteReader(body)
    sub_id = reader.read_u8('message 101 sub-ID')
    if sub_id == SUBMSG_DEVICE_ID:
        return DeviceId()
    if sub_id == SUBMSG_ATTITUDE:
        return _decode_attitude(reader)
    raise UnsupportedError('message 101 sub-ID', f"sub-ID {sub_id} is not defined")


def _decode_ownship_report(body: bytes) -> OwnshipReport:
    return OwnshipReport(decode_traffic_report(body))


def _decode_traffic_report(body: bytes) -> TrafficReportMessage:
    return TrafficReportMessage(decode_traffic_report(body))


# Messages that carry nothing this decoder interprets
_EMPTY_MESSAGES = {
    MSG_INITIALIZATION: Initialization,
    MSG_HEIGHT_ABOVE_TERRAIN: HeightAboveTerrain,
    MSG_BASIC_REPORT: BasicReport,
    MSG_LONG_REPORT: LongReport,
}

DECODERS: Dict[int, Callable[[bytes], Message]] = {
    MSG_HEARTBEAT: _decode_heartbeat,
    MSG_UPLINK_DATA: _decode_uplink_data,
    MSG_OWNSHIP_REPORT: _decode_ownship_report,
    MSG_OWNSHIP_GEOMETRIC_ALTITUDE: _decode_geometric_altitude,
    MSG_TRAFFIC_REPORT: _decode_traffic_report,
    MSG_FOREFLIGHT: _decode_foreflight,
}


def decode_message(data: bytes) -> Message:
    """
    Decode one GDL-90 datagram
    
    Args:
        data: Datagram starting with the 0x7E sync byte and the message ID
        
    Returns:
        The decoded message; unrecognised message IDs give Unknown
        
    Raises:
        FormatError: If the datagram or any field in it is malformed
        UnsupportedError: For an undefined message 101 sub-ID
    """
    if len(data) < 2:
        raise FormatError('datagram', f"{len(data)} bytes is too short")
    if data[0] != SYNC_BYTE:
        raise FormatError('sync byte', f"expected 0x{SYNC_BYTE:02X}, got 0x{data[0]:02X}")
    
    message_id = data[1]
    body = bytes(data[2:])
    
    if message_id in _EMPTY_MESSAGES:
        logger.dispatch(f"Message ID {message_id} -> {_EMPTY_MESSAGES[message_id].__name__}")
        return _EMPTY_MESSAGES[message_id]()

    decoder = DECODERS.get(message_id)
    if decoder is None:
        logger.dispatch(f"Unknown message ID {message_id}, {len(body)} bytes kept")
        return Unknown(message_id, body)

    logger.dispatch(f"Message ID {message_id} -> {decoder.__name__}")
    return decoder(body)


# Public entry point: decode(datagram) -> Message
decode = decode_message


class GDL90Decoder:
    """Decoder front end that keeps statistics for one receive loop"""
    
    def __init__(self):
        self.messages_decoded = 0
        self.decode_errors = 0
        self.unknown_messages = 0
        self.message_counts: Dict[str, int] = {}
    
    def decode(self, data: bytes) -> Message:
        """
        Decode a datagram and record the outcome
        
        Errors are counted and logged, then re-raised.
        """
        logger.hex_data(data, "GDL90")
        try:
            message = decode_message(data)
        except FormatError as e:
            self.decode_errors += 1
            logger.error(f"[GDL90] Decode error: {e}")
            raise
        
        self.messages_decoded += 1
        if isinstance(message, Unknown):
            self.unknown_messages += 1
        name = type(message).__name__
        self.message_counts[name] = self.message_counts.get(name, 0) + 1
        return message
    
    def get_stats(self) -> dict:
        """
        Get decoding statistics
        
        Returns:
            Dictionary of statistics
        """
        total = self.messages_decoded + self.decode_errors
        return {
            'messages_decoded': self.messages_decoded,
            'decode_errors': self.decode_errors,
            'unknown_messages': self.unknown_messages,
            'message_counts': dict(self.message_counts),
            'success_rate': round((self.messages_decoded / max(1, total)) * 100, 1)
        }
    
    def reset_stats(self):
        """Reset statistics counters"""
        self.messages_decoded = 0
        self.decode_errors = 0
        self.unknown_messages = 0
        self.message_counts = {}
