"""
Centralized logging system for the Stratus GDL-90 Decoder

The log file is opened on the first record written, so importing a decoder
module touches no files.
"""

import logging
import logging.handlers
import os
from typing import Optional
import config


class DecoderLogger:
    """Centralized logger for the decoding pipeline"""
    
    _instance: Optional['DecoderLogger'] = None
    _logger: Optional[logging.Logger] = None
    
    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance
    
    def __init__(self):
        if self._logger is None:
            self._logger = logging.getLogger('gdl90')
            # Always log at DEBUG level; what actually gets written is gated by config flags
            self._logger.setLevel(logging.DEBUG)
            # Keep decoder chatter out of whatever the host application logs to
            self._logger.propagate = False
    
    def _setup_handler(self):
        """Attach the rotating file handler"""
        log_file = config.LOG_FILE if config.LOG_FILE else 'logs/gdl90_decoder.log'
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self._logger.addHandler(file_handler)
        
        self._logger.info("=" * 60)
        self._logger.info("GDL-90 Decoder Logger initialized")
        self._logger.info(f"Log file: {os.path.abspath(log_file)}")
        self._logger.info("=" * 60)
    
    def _emit(self, level: int, message: str):
        """Write one record, opening the log file on first use"""
        if not self._logger.handlers:
            self._setup_handler()
        self._logger.log(level, message)
    
    def debug(self, message: str):
        """Log debug message"""
        if config.ENABLE_LOGGING:
            self._emit(logging.DEBUG, message)
    
    def info(self, message: str):
        """Log info message"""
        if config.ENABLE_LOGGING:
            self._emit(logging.INFO, message)
    
    def warning(self, message: str):
        """Log warning message"""
        self._emit(logging.WARNING, message)
    
    def error(self, message: str):
        """Log error message"""
        self._emit(logging.ERROR, message)
    
    def dispatch(self, message: str):
        """Log message ID routing if enabled"""
        if config.LOG_MESSAGE_DISPATCH:
            self.debug(f"[DISPATCH] {message}")
    
    def uplink(self, message: str):
        """Log FIS-B uplink frame decoding if enabled"""
        if config.LOG_UPLINK_FRAMES:
            self.debug(f"[UPLINK] {message}")
    
    def dlac(self, message: str):
        """Log recovered DLAC text if enabled"""
        if config.LOG_DLAC_TEXT:
            self.debug(f"[DLAC] {message}")
    
    def metar(self, message: str):
        """Log METAR grammar matching if enabled"""
        if config.LOG_METAR_PARSING:
            self.debug(f"[METAR] {message}")
    
    def deframing(self, message: str):
        """Log deframing process if enabled"""
        if config.LOG_DEFRAMING_PROCESS:
            self.debug(f"[DEFRAME] {message}")
    
    def hex_data(self, data: bytes, prefix: str = "HEX"):
        """Log hex data for debugging"""
        if not config.LOG_HEX_DATA:
            return
        self.debug(f"[{prefix}] Raw hex ({len(data)} bytes): {data.hex()}")
        
        ascii_repr = ''.join(chr(b) if 32 <= b <= 126 else f'\\x{b:02x}' for b in data)
        self.debug(f"[{prefix}] ASCII repr: {ascii_repr}")


# Global logger instance
logger = DecoderLogger()
