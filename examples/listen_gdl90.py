#!/usr/bin/python3
"""
GDL-90 Receive Loop Example

Listens for GDL-90 datagrams from a Stratus (or compatible) ADS-B receiver
and prints each decoded message. A UDP datagram holding a complete
flag-delimited frame is deframed before decoding; a serial connection
delivers a continuous byte stream, which is deframed as it arrives.

Usage:
    python listen_gdl90.py [--port 4000]
    python listen_gdl90.py --serial [/dev/ttyUSB0] [--baudrate 38400]
"""

import sys
import argparse
import socket
from pathlib import Path

# Add parent directory to Python path to access project modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import config
from gdl90_decoder import GDL90Decoder
from gdl90_deframer import GDL90Deframer
from gdl90_errors import FormatError
from logger import logger


def print_datagram(decoder: GDL90Decoder, datagram: bytes):
    try:
        print(decoder.decode(datagram))
    except FormatError as e:
        print(f"Undecodable datagram ({e}): {datagram.hex()}")


def listen_udp(host: str, port: int):
    decoder = GDL90Decoder()
    deframer = GDL90Deframer()
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind((host, port))
    print(f"Listening for GDL-90 on {host}:{port}")
    logger.info(f"UDP receive loop started on {host}:{port}")
    
    try:
        while True:
            data, _ = sock.recvfrom(config.BUFFER_SIZE)
            # Receivers send complete frames; strip escapes and CRC before decoding
            if deframer.is_gdl90_frame(data):
                datagrams = deframer.deframe_message(data)
            else:
                datagrams = [data]
            for datagram in datagrams:
                print_datagram(decoder, datagram)
    finally:
        sock.close()
        logger.info(f"UDP receive loop stopped: {decoder.get_stats()} {deframer.get_stats()}")
        print(f"Stats: {decoder.get_stats()}")


def listen_serial(port: str, baudrate: int):
    import serial
    
    decoder = GDL90Decoder()
    deframer = GDL90Deframer()
    
    with serial.Serial(port, baudrate, timeout=config.SERIAL_TIMEOUT) as ser:
        print(f"Reading GDL-90 from {port} at {baudrate} baud")
        logger.info(f"Serial receive loop started on {port} at {baudrate} baud")
        while True:
            for datagram in deframer.feed(ser.read(config.BUFFER_SIZE)):
                print_datagram(decoder, datagram)


def main():
    parser = argparse.ArgumentParser(description="Print decoded GDL-90 messages")
    parser.add_argument('--host', default=config.UDP_HOST, help="UDP address to bind")
    parser.add_argument('--port', type=int, default=config.UDP_PORT, help="UDP port to bind")
    parser.add_argument('--serial', metavar='DEVICE', nargs='?', const=config.SERIAL_PORT,
                        help=f"Read a serial device instead of UDP (default {config.SERIAL_PORT})")
    parser.add_argument('--baudrate', type=int, default=config.SERIAL_BAUDRATE)
    args = parser.parse_args()
    
    try:
        if args.serial:
            listen_serial(args.serial, args.baudrate)
        else:
            listen_udp(args.host, args.port)
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
