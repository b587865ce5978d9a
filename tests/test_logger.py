"""
Unit tests for logger module
"""

import logging
import pytest
import sys
import os
from unittest.mock import patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from logger import DecoderLogger, logger
from gdl90_decoder import decode_message
from fisb_builders import encode_dlac, uplink_header, frame

HEARTBEAT_PACKET = bytes.fromhex("7E 00 81 41 DB D0 08 02 B3 8B 7E")

TRAFFIC_PACKET = bytes.fromhex(
    "7E1400A10931179CFBB9CF0346D9891C7011CE0341414C3230363520" "00D6F67E")


def uplink_packet() -> bytes:
    text = encode_dlac("METAR KSEA 091953Z 18010KT 10SM OVC020 12/08 A2992")
    body = (b'\x00\x00\x00' + uplink_header(0, 0)
            + frame(413, 19, 53, text) + frame(63, 19, 55) + frame(8, 19, 55))
    return b'\x7E\x07' + body


class TestDecoderLogger:
    """Test config gating of the decoder logger"""
    
    def test_singleton(self):
        assert DecoderLogger() is logger
    
    def test_decoding_writes_nothing_by_default(self):
        """Test that default settings keep decoding free of log I/O"""
        with patch.object(DecoderLogger, '_emit') as emit:
            decode_message(HEARTBEAT_PACKET)
            decode_message(TRAFFIC_PACKET)
            decode_message(uplink_packet())
            decode_message(b'\x7E\xC8\x01\x02')
        
        emit.assert_not_called()
    
    @patch('config.LOG_MESSAGE_DISPATCH', True)
    def test_dispatch_flag_enables_logging(self):
        with patch.object(DecoderLogger, '_emit') as emit:
            decode_message(HEARTBEAT_PACKET)
        
        level, message = emit.call_args[0]
        assert level == logging.DEBUG
        assert message.startswith("[DISPATCH]")
    
    @patch('config.ENABLE_LOGGING', False)
    @patch('config.LOG_UPLINK_FRAMES', True)
    def test_enable_logging_off_suppresses_categories(self):
        with patch.object(DecoderLogger, '_emit') as emit:
            decode_message(uplink_packet())
            logger.info("receive loop started")
        
        emit.assert_not_called()
    
    @patch('config.ENABLE_LOGGING', False)
    def test_warnings_always_written(self):
        with patch.object(DecoderLogger, '_emit') as emit:
            logger.warning("CRC mismatch")
            logger.error("decode error")
        
        assert [c[0][0] for c in emit.call_args_list] == [logging.WARNING, logging.ERROR]
    
    def test_info(self):
        with patch.object(DecoderLogger, '_emit') as emit:
            logger.info("receive loop started")
        emit.assert_called_once_with(logging.INFO, "receive loop started")
    
    def test_file_opened_on_first_record(self):
        """Test that the file handler is attached lazily"""
        with patch.object(logger._logger, 'handlers', []), \
             patch.object(DecoderLogger, '_setup_handler') as setup, \
             patch.object(logger._logger, 'log') as log:
            logger.warning("first record")
        
        setup.assert_called_once_with()
        log.assert_called_once_with(logging.WARNING, "first record")


if __name__ == "__main__":
    pytest.main([__file__])
