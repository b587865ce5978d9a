"""
Unit tests for dlac_decoder module
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dlac_decoder import DLACDecoder, DecoderPhase, DLAC_TABLE, FILLER, decode_dlac
from fisb_builders import encode_dlac


class TestDlacTable:
    """Test the symbol table"""
    
    def test_table_size(self):
        assert len(DLAC_TABLE) == 64
    
    def test_printable_codes(self):
        assert DLAC_TABLE[1] == 'A'
        assert DLAC_TABLE[26] == 'Z'
        assert DLAC_TABLE[32] == ' '
        assert DLAC_TABLE[47] == '/'
        assert DLAC_TABLE[48:58] == '0123456789'
    
    @pytest.mark.parametrize("code", [0, 27, 31, 33, 46, 58, 63])
    def test_filler_codes(self, code):
        assert DLAC_TABLE[code] == FILLER


class TestDLACDecoder:
    """Test the three-phase decoding state machine"""
    
    def setup_method(self):
        """Set up test fixtures"""
        self.decoder = DLACDecoder()
    
    def test_initial_state(self):
        assert self.decoder.phase is DecoderPhase.STEP_ONE
        assert self.decoder.carry == 0
        assert self.decoder.get_result() == ""
    
    def test_one_cycle(self):
        """Test that three bytes produce four symbols"""
        self.decoder.feed(bytes([0x04, 0x20, 0xC4]))
        assert self.decoder.get_result() == "ABCD"
    
    def test_phase_rotation(self):
        self.decoder.next(0x04)
        assert self.decoder.phase is DecoderPhase.STEP_TWO
        self.decoder.next(0x20)
        assert self.decoder.phase is DecoderPhase.STEP_THREE
        self.decoder.next(0xC4)
        assert self.decoder.phase is DecoderPhase.STEP_ONE
    
    def test_carry_between_bytes(self):
        """Test that the low bits of each byte start the next symbol"""
        self.decoder.next(0x07)
        assert self.decoder.carry == 0x03
        self.decoder.next(0x2F)
        assert self.decoder.carry == 0x0F
        assert self.decoder.get_result() == DLAC_TABLE[1] + DLAC_TABLE[0x32]
    
    @pytest.mark.parametrize("length", range(0, 13))
    def test_symbol_count(self, length):
        """Test that N bytes always give floor(4N/3) symbols"""
        self.decoder.feed(bytes(range(0x40, 0x40 + length)))
        assert len(self.decoder.get_result()) == (4 * length) // 3
    
    def test_get_result_resets_mid_cycle(self):
        """Test that extracting the result discards any carried bits"""
        self.decoder.next(0x07)
        assert self.decoder.get_result() == "A"
        assert self.decoder.phase is DecoderPhase.STEP_ONE
        assert self.decoder.carry == 0
        
        self.decoder.next(0x20)
        assert self.decoder.get_result() == "H"
    
    def test_sessions_are_independent(self):
        other = DLACDecoder()
        self.decoder.next(0x07)
        other.feed(bytes([0x04, 0x20, 0xC4]))
        assert other.get_result() == "ABCD"
        assert self.decoder.phase is DecoderPhase.STEP_TWO


class TestDecodeDlac:
    """Test the convenience function"""
    
    def test_text_round_trip(self):
        text = "METAR KXYZ 151854Z 18012G20KT 10SM 24/18 A3001"
        decoded = decode_dlac(encode_dlac(text))
        assert decoded.startswith(text)
        assert set(decoded[len(text):]) <= {FILLER}
    
    def test_empty(self):
        assert decode_dlac(b'') == ""
