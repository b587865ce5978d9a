"""
GDL-90 Deframer
Splits a flag-delimited GDL-90 byte stream into individual messages
"""

from typing import List, Optional, Tuple
import config
from logger import logger


def _build_crc16_table() -> Tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i << 8
        for _ in range(8):
            crc = ((crc << 1) ^ 0x1021) if crc & 0x8000 else (crc << 1)
        table.append(crc & 0xFFFF)
    return tuple(table)


CRC16_TABLE = _build_crc16_table()


def gdl90_crc(data: bytes) -> int:
    """
    CRC-16-CCITT as used for the GDL-90 frame check sequence
    
    Args:
        data: Message ID and body (no flags, unstuffed)
        
    Returns:
        16-bit CRC; transmitted least significant byte first
    """
    crc = 0
    for byte_val in data:
        crc = CRC16_TABLE[crc >> 8] ^ ((crc << 8) & 0xFFFF) ^ byte_val
    return crc


class GDL90Deframer:
    """GDL-90 deframer producing datagrams ready for decode_message()"""
    
    FLAG_BYTE = 0x7E                    # Frame boundary marker
    ESCAPE_BYTE = 0x7D                  # Escape byte
    ESCAPE_XOR = 0x20                   # Escaped bytes are XORed with this
    
    CRC_LENGTH = 2
    MIN_FRAME_LENGTH = 1 + CRC_LENGTH   # Message ID + CRC
    MAX_PENDING_BYTES = 2048            # Longest unterminated frame kept by feed()
    
    def __init__(self):
        """Initialize the GDL-90 deframer"""
        self.frames_processed = 0
        self.frames_extracted = 0
        self.crc_failures = 0
        self.short_frames = 0
        self.byte_unstuff_operations = 0
        self._pending = bytearray()

    def deframe_message(self, raw_data: bytes) -> List[bytes]:
        """
        Extract messages from flag-delimited GDL-90 data
        
        Args:
            raw_data: Raw bytes containing one or more GDL-90 frames
            
        Returns:
            List of datagrams, each 0x7E + message ID + body
        """
        if not raw_data:
            return []
            
        logger.deframing(f"Processing {len(raw_data)} bytes: {raw_data.hex()}")
        
        messages = []
        frame_boundaries = self._find_frame_boundaries(raw_data)
        logger.deframing(f"Found {len(frame_boundaries)} frames")
        
        for start_pos, end_pos in frame_boundaries:
            self.frames_processed += 1
            
            unstuffed_data = self._unstuff_bytes(raw_data[start_pos + 1:end_pos])
            
            message = self._check_frame(unstuffed_data)
            if message is not None:
                messages.append(bytes([self.FLAG_BYTE]) + message)
                logger.deframing(f"Extracted message ID {message[0]}: {message.hex()}")
                    
        self.frames_extracted += len(messages)
        return messages
    
    def feed(self, data: bytes) -> List[bytes]:
        """
        Deframe a chunk of a continuous byte stream (e.g. serial reads)
        
        A frame split across chunks is held until its closing flag arrives.
        Bytes before the first flag are dropped, and an unterminated frame
        longer than MAX_PENDING_BYTES is discarded.
        
        Args:
            data: Next chunk of the stream
            
        Returns:
            List of datagrams completed by this chunk
        """
        self._pending.extend(data)
        
        last_flag = self._pending.rfind(bytes([self.FLAG_BYTE]))
        if last_flag < 0:
            self._pending.clear()
            return []
        
        messages = []
        if last_flag > 0:
            messages = self.deframe_message(bytes(self._pending[:last_flag + 1]))
        # The last flag may open the next frame
        del self._pending[:last_flag]
        
        if len(self._pending) > self.MAX_PENDING_BYTES:
            logger.deframing(f"Dropping {len(self._pending)} bytes of unterminated frame")
            self._pending.clear()
        return messages
    
    def _find_frame_boundaries(self, data: bytes) -> List[Tuple[int, int]]:
        """
        Find GDL-90 frame boundaries marked by 0x7E flags
        
        Args:
            data: Raw data to search
            
        Returns:
            List of (start_pos, end_pos) tuples for each frame
        """
        boundaries = []
        start_pos = None
        
        for i, byte_val in enumerate(data):
            if byte_val == self.FLAG_BYTE:
                if start_pos is not None and i > start_pos + 1:
                    boundaries.append((start_pos, i))
                # An end flag may also open the next frame
                start_pos = i
        
        return boundaries
    
    def _unstuff_bytes(self, frame_data: bytes) -> bytes:
        """
        Remove byte stuffing from frame data
        
        Stuffing rules:
        - 0x7D 0x5E -> 0x7E (escaped flag)
        - 0x7D 0x5D -> 0x7D (escaped escape)
        
        Args:
            frame_data: Frame content between flags
            
        Returns:
            Unstuffed bytes
        """
        unstuffed = bytearray()
        i = 0
        
        while i < len(frame_data):
            if frame_data[i] == self.ESCAPE_BYTE and i + 1 < len(frame_data):
                unstuffed.append(frame_data[i + 1] ^ self.ESCAPE_XOR)
                self.byte_unstuff_operations += 1
                i += 2
            else:
                unstuffed.append(frame_data[i])
                i += 1
        
        return bytes(unstuffed)
    
    def _check_frame(self, unstuffed_data: bytes) -> Optional[bytes]:
        """
        Validate length and CRC, returning the message without its CRC
        
        Args:
            unstuffed_data: Message ID, body and CRC
            
        Returns:
            Message ID + body, or None if the frame is rejected
        """
        if len(unstuffed_data) < self.MIN_FRAME_LENGTH:
            self.short_frames += 1
            logger.deframing(f"Frame too short: {len(unstuffed_data)} bytes")
            return None
        
        message = unstuffed_data[:-self.CRC_LENGTH]
        
        if config.GDL90_VALIDATE_CHECKSUMS:
            received_crc = unstuffed_data[-2] | (unstuffed_data[-1] << 8)
            calculated_crc = gdl90_crc(message)
            if received_crc != calculated_crc:
                self.crc_failures += 1
                logger.warning(f"[DEFRAME] CRC mismatch for message ID {message[0]}: "
                               f"received 0x{received_crc:04X}, calculated 0x{calculated_crc:04X}")
                return None
        
        return message
    
    def is_gdl90_frame(self, data: bytes) -> bool:
        """
        Check if data appears to be a complete flag-delimited frame
        
        Args:
            data: Raw data to check
            
        Returns:
            True if data starts and ends with a flag byte
        """
        return (len(data) >= self.MIN_FRAME_LENGTH + 2 and
                data[0] == self.FLAG_BYTE and
                data[-1] == self.FLAG_BYTE)
    
    def get_stats(self) -> dict:
        """
        Get deframing statistics
        
        Returns:
            Dictionary of statistics
        """
        return {
            'frames_processed': self.frames_processed,
            'frames_extracted': self.frames_extracted,
            'crc_failures': self.crc_failures,
            'short_frames': self.short_frames,
            'byte_unstuff_operations': self.byte_unstuff_operations,
            'success_rate': round((self.frames_extracted / max(1, self.frames_processed)) * 100, 1)
        }
    
    def reset_stats(self):
        """Reset statistics counters"""
        self.frames_processed = 0
        self.frames_extracted = 0
        self.crc_failures = 0
        self.short_frames = 0
        self.byte_unstuff_operations = 0


def deframe_gdl90_data(raw_data: bytes) -> List[bytes]:
    """
    Convenience function to deframe GDL-90 data
    
    Args:
        raw_data: Raw GDL-90 data
        
    Returns:
        List of datagrams ready for decoding
    """
    deframer = GDL90Deframer()
    return deframer.deframe_message(raw_data)
