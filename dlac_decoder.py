"""
DLAC 6-bit text decoder for FIS-B generic text products

Every three payload bytes carry four 6-bit symbols. The decoder walks the
bytes one at a time through a three-phase rotation, carrying the leftover
low bits of each byte into the next symbol.
"""

from enum import Enum
from typing import Iterable

FILLER = '_'

# Symbol code -> character. Codes without a printable mapping become FILLER.
DLAC_TABLE = (
    FILLER + 'ABCDEFGHIJKLMNOPQRSTUVWXYZ' + FILLER * 5 +   # 0-31
    ' ' + FILLER * 14 + '/' +                               # 32-47
    '0123456789' + FILLER * 6                               # 48-63
)


class DecoderPhase(Enum):
    STEP_ONE = 1
    STEP_TWO = 2
    STEP_THREE = 3


class DLACDecoder:
    """Stateful DLAC decoder; use one instance per text payload"""
    
    def __init__(self):
        self.phase = DecoderPhase.STEP_ONE
        self.carry = 0
        self.symbols = []
    
    def next(self, byte_val: int):
        """
        Feed one payload byte
        
        Args:
            byte_val: Next byte of the DLAC stream (0-255)
        """
        if self.phase is DecoderPhase.STEP_ONE:
            self.symbols.append(DLAC_TABLE[byte_val >> 2])
            self.carry = byte_val & 0x03
            self.phase = DecoderPhase.STEP_TWO
        elif self.phase is DecoderPhase.STEP_TWO:
            self.symbols.append(DLAC_TABLE[(self.carry << 4) | (byte_val >> 4)])
            self.carry = byte_val & 0x0F
            self.phase = DecoderPhase.STEP_THREE
        else:
            self.symbols.append(DLAC_TABLE[(self.carry << 2) | (byte_val >> 6)])
            self.symbols.append(DLAC_TABLE[byte_val & 0x3F])
            self.carry = 0
            self.phase = DecoderPhase.STEP_ONE
    
    def feed(self, data: Iterable[int]):
        for byte_val in data:
            self.next(byte_val)
    
    def get_result(self) -> str:
        """Return the decoded text and reset the decoder for a new session"""
        text = ''.join(self.symbols)
        self.phase = DecoderPhase.STEP_ONE
        self.carry = 0
        self.symbols = []
        return text


def decode_dlac(data: bytes) -> str:
    """
    Convenience function to decode a complete DLAC payload
    
    Args:
        data: DLAC-encoded bytes
        
    Returns:
        Decoded text
    """
    decoder = DLACDecoder()
    decoder.feed(data)
    return decoder.get_result()
