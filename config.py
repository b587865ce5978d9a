"""
Configuration settings for the Stratus GDL-90 Decoder
"""

# Network Configuration (used by the example receive loop only)
UDP_PORT = 4000            # GDL-90 broadcast port used by Stratus / ForeFlight receivers
UDP_HOST = '0.0.0.0'       # Listen on all interfaces
SOCKET_TIMEOUT = 5.0       # seconds
BUFFER_SIZE = 1024

# Serial Port Configuration (used by the example receive loop only)
SERIAL_PORT = '/dev/ttyUSB0'    # Serial port device (Linux/Mac) or 'COM1' (Windows)
SERIAL_BAUDRATE = 38400         # GDL-90 serial interface rate
SERIAL_TIMEOUT = 1.0            # Read timeout in seconds

# Logging Configuration
ENABLE_LOGGING = True
LOG_FILE = 'logs/gdl90_decoder.log'
LOG_MESSAGE_DISPATCH = False    # Log message ID routing
LOG_UPLINK_FRAMES = False       # Log FIS-B frame and APDU decoding
LOG_DLAC_TEXT = False           # Log recovered DLAC text
LOG_METAR_PARSING = False       # Log METAR grammar matches
LOG_HEX_DATA = False            # Log raw hex data for debugging corruption

# GDL-90 Deframing
LOG_DEFRAMING_PROCESS = False           # Log detailed deframing steps
GDL90_VALIDATE_CHECKSUMS = True         # Drop frames whose CRC-16 does not match
