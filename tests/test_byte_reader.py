"""
Unit tests for byte_reader module
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from byte_reader import ByteReader
from gdl90_errors import FormatError


class TestByteReader:
    """Test sequential big-endian reads"""
    
    def test_big_endian_reads(self):
        reader = ByteReader(bytes.fromhex("01 0203 04050607 FFFE"))
        
        assert reader.read_u8('a') == 0x01
        assert reader.read_u16('b') == 0x0203
        assert reader.read_u32('c') == 0x04050607
        assert reader.read_i16('d') == -2
        assert reader.remaining == 0
    
    def test_little_endian_u16(self):
        assert ByteReader(bytes.fromhex("DBD0")).read_u16le('timestamp') == 0xD0DB
    
    def test_24_bit_reads(self):
        reader = ByteReader(bytes.fromhex("800000 7FFFFF FFFFFF"))
        
        assert reader.read_i24('lat') == -0x800000
        assert reader.read_i24('lat') == 0x7FFFFF
        assert reader.read_u24('raw') == 0xFFFFFF
    
    def test_short_read_names_field(self):
        reader = ByteReader(b'\x01')
        
        with pytest.raises(FormatError) as exc_info:
            reader.read_u16('heartbeat timestamp')
        
        assert exc_info.value.field == 'heartbeat timestamp'
        assert str(exc_info.value).startswith('heartbeat timestamp: ')
        # A failed read does not move the cursor
        assert reader.offset == 0
    
    def test_read_bytes_past_end(self):
        reader = ByteReader(b'AB')
        with pytest.raises(FormatError):
            reader.read_bytes(3, 'callsign')
        assert reader.read_bytes(2, 'callsign') == b'AB'
    
    def test_read_rest(self):
        reader = ByteReader(b'\x00\x01\x02')
        reader.read_u8('id')
        
        assert reader.read_rest() == b'\x01\x02'
        assert reader.remaining == 0
        assert reader.read_rest() == b''


if __name__ == "__main__":
    pytest.main([__file__])
