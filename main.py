"""
Interactive lift simulator

Usage:
    python main.py [config.yaml] [--speed FACTOR] [--http-port PORT] [--event-log FILE] [--summary]
"""
import sys

from controller.command_shell import main

if __name__ == "__main__":
    sys.exit(main())
