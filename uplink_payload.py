"""
FIS-B uplink payload decoder

An uplink payload is an 8-byte ground station header followed by a run of
length-prefixed frames, each carrying one APDU (Application Protocol Data
Unit). Frames are decoded until the first one that fails; a bad frame ends
the sequence instead of failing the whole payload.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union
from byte_reader import ByteReader
from dlac_decoder import DLACDecoder
from fisb_text import Text, decode_text
from gdl90_errors import FormatError, UnsupportedError
from logger import logger

# Ground station lat/lon resolution in degrees
LAT_LON_LSB = 0.000021458

HEADER_LENGTH = 8
FRAME_HEADER_LENGTH = 2
APDU_HEADER_LENGTH = 4

# Frame type 0 is "FIS-B APDU"; every other value is reserved
FRAME_TYPE_FISB_APDU = 0

PRODUCT_NEXRAD_PRECIPITATION = 63
PRODUCT_GENERIC_TEXT = 413

# APDU header flag bits: application method, geo-location, provider-specific, segmentation
APDU_FLAG_A = 0x80000000
APDU_FLAG_G = 0x40000000
APDU_FLAG_P = 0x20000000
APDU_FLAG_S = 0x00020000
APDU_FLAGS = APDU_FLAG_A | APDU_FLAG_G | APDU_FLAG_P | APDU_FLAG_S


@dataclass(frozen=True)
class NexradPrecipitationImage:
    hour: int
    minute: int


@dataclass(frozen=True)
class GenericText:
    hour: int
    minute: int
    text: Text


@dataclass(frozen=True)
class UnknownFrame:
    id: int
    length: int
    hour: int
    minute: int


Frame = Union[NexradPrecipitationImage, GenericText, UnknownFrame]


@dataclass(frozen=True)
class UplinkPayload:
    ground_station_latitude_deg: float
    ground_station_longitude_deg: float
    frames: Tuple[Frame, ...]


def decode_ground_station_latitude(header_msp: int) -> float:
    """
    Decode the 23-bit latitude field from the first header word
    
    The top two bits of the field select the quadrant, the low 21 bits are
    the angular part.
    """
    raw = header_msp >> 9
    angular_part = raw & 0x1FFFFF
    quadrant = raw >> 21
    
    if quadrant == 0:
        return angular_part * LAT_LON_LSB
    if quadrant == 1:
        if angular_part == 0:
            return 90.0
        raise FormatError('ground station latitude', "nonzero angular part in quadrant 1")
    if quadrant == 2:
        raise FormatError('ground station latitude', "quadrant 2 is invalid")
    if quadrant == 3:
        return angular_part * LAT_LON_LSB - 90.0
    raise FormatError('ground station latitude', f"invalid quadrant {quadrant}")


def decode_ground_station_longitude(header_msp: int, header_lsp: int) -> float:
    """Decode the 24-bit longitude field split across both header words"""
    raw = ((header_msp & 0x1FF) << 15) | (header_lsp >> 17)
    angular_part = raw & 0x3FFFFF
    quadrant = raw >> 23
    
    if quadrant == 0:
        return angular_part * LAT_LON_LSB
    if quadrant == 1:
        return angular_part * LAT_LON_LSB - 180.0
    raise FormatError('ground station longitude', f"invalid quadrant {quadrant}")


def decode_apdu(apdu_header: bytes, apdu_payload: bytes) -> Frame:
    """
    Decode one APDU into a frame variant
    
    Args:
        apdu_header: 4-byte APDU header
        apdu_payload: Product data following the header
        
    Returns:
        NexradPrecipitationImage, GenericText or UnknownFrame
        
    Raises:
        UnsupportedError: If any of the A/G/P/S flags are set
        FormatError: If the header is short or the time is out of range
    """
    header = ByteReader(apdu_header).read_u32('APDU header')
    
    if header & APDU_FLAGS:
        raise UnsupportedError('APDU header', f"flags not supported: 0x{header & APDU_FLAGS:08X}")
    
    product_id = (header >> 18) & 0x7FF
    hour = (header >> 10) & 0x1F
    minute = (header >> 4) & 0x3F
    if hour > 23:
        raise FormatError('APDU hour', f"{hour} is out of range")
    if minute > 59:
        raise FormatError('APDU minute', f"{minute} is out of range")
    
    if product_id == PRODUCT_NEXRAD_PRECIPITATION:
        return NexradPrecipitationImage(hour, minute)
    
    if product_id == PRODUCT_GENERIC_TEXT:
        decoder = DLACDecoder()
        decoder.feed(apdu_payload)
        text = decoder.get_result()
        logger.dlac(f"Product {product_id} at {hour:02d}:{minute:02d}: {text!r}")
        return GenericText(hour, minute, decode_text(text))
    
    logger.uplink(f"Unknown product {product_id}, {len(apdu_payload)} bytes")
    return UnknownFrame(product_id, len(apdu_payload), hour, minute)


def decode_frame(reader: ByteReader) -> Frame:
    """
    Decode the next frame from the reader
    
    Raises:
        FormatError: If no complete, valid frame is available
    """
    if reader.remaining <= FRAME_HEADER_LENGTH:
        raise FormatError('frame header', "not enough bytes for a frame")
    
    header = reader.read_u16('frame header')
    # 9 bits of length, 3 reserved, 4 bits of frame type
    length = header >> 7
    frame_type = header & 0x0F
    
    if length < APDU_HEADER_LENGTH:
        raise FormatError('frame length', f"{length} is too short for an APDU header")
    if frame_type != FRAME_TYPE_FISB_APDU:
        raise FormatError('frame type', f"{frame_type} is not a FIS-B APDU")
    if reader.remaining < length:
        raise FormatError('frame length', f"declares {length} bytes, {reader.remaining} remain")
    
    apdu_header = reader.read_bytes(APDU_HEADER_LENGTH, 'APDU header')
    apdu_payload = reader.read_bytes(length - APDU_HEADER_LENGTH, 'APDU payload')
    return decode_apdu(apdu_header, apdu_payload)


def decode_frames(reader: ByteReader) -> List[Frame]:
    """Decode frames until the first failure, which ends the sequence"""
    frames = []
    while True:
        try:
            frames.append(decode_frame(reader))
        except FormatError as e:
            logger.uplink(f"End of frames after {len(frames)}: {e}")
            return frames


def decode_uplink_payload(data: bytes) -> UplinkPayload:
    """
    Decode an uplink payload (ground station header plus frames)
    
    Args:
        data: Payload bytes following the time of reception
        
    Returns:
        UplinkPayload
        
    Raises:
        FormatError: If the header is short or its coordinates are invalid
    """
    reader = ByteReader(data)
    header_msp = reader.read_u32('uplink header')
    header_lsp = reader.read_u32('uplink header')
    
    latitude = decode_ground_station_latitude(header_msp)
    longitude = decode_ground_station_longitude(header_msp, header_lsp)
    logger.uplink(f"Ground station at {latitude:.5f}, {longitude:.5f}")
    
    return UplinkPayload(latitude, longitude, tuple(decode_frames(reader)))
