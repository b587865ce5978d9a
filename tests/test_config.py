"""
Unit tests for config module
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config


class TestConfig:
    """Test configuration settings and defaults"""
    
    def test_network_configuration_defaults(self):
        """Test network configuration defaults"""
        assert config.UDP_PORT == 4000
        assert config.UDP_HOST == '0.0.0.0'
        assert config.SOCKET_TIMEOUT == 5.0
        assert config.BUFFER_SIZE == 1024
    
    def test_serial_configuration_defaults(self):
        """Test serial configuration defaults"""
        assert config.SERIAL_PORT == '/dev/ttyUSB0'
        assert config.SERIAL_BAUDRATE == 38400
        assert config.SERIAL_TIMEOUT == 1.0
    
    def test_logging_configuration_defaults(self):
        """Test logging configuration defaults"""
        assert config.ENABLE_LOGGING is True
        assert config.LOG_FILE == 'logs/gdl90_decoder.log'
        assert config.LOG_MESSAGE_DISPATCH is False
        assert config.LOG_UPLINK_FRAMES is False
        assert config.LOG_DLAC_TEXT is False
        assert config.LOG_METAR_PARSING is False
        assert config.LOG_HEX_DATA is False
    
    def test_gdl90_configuration_defaults(self):
        """Test GDL-90 configuration defaults"""
        assert config.LOG_DEFRAMING_PROCESS is False
        assert config.GDL90_VALIDATE_CHECKSUMS is True
    
    def test_config_values_types(self):
        """Test that configuration values have expected types"""
        assert isinstance(config.UDP_PORT, int)
        assert isinstance(config.UDP_HOST, str)
        assert isinstance(config.SOCKET_TIMEOUT, float)
        assert isinstance(config.BUFFER_SIZE, int)
        assert isinstance(config.SERIAL_PORT, str)
        assert isinstance(config.SERIAL_BAUDRATE, int)
        assert isinstance(config.ENABLE_LOGGING, bool)
        assert isinstance(config.LOG_FILE, str)
    
    def test_config_values_ranges(self):
        """Test that configuration values are within expected ranges"""
        assert 1 <= config.UDP_PORT <= 65535
        assert config.SOCKET_TIMEOUT > 0
        assert config.BUFFER_SIZE > 0
        assert config.SERIAL_TIMEOUT > 0
