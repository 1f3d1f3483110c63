#!/usr/bin/env python3
"""
Convenience entry point for running salonscheduler directly.

Usage: python salonscheduler.py [command] [options]
"""

from salonscheduler.cli.app import app

if __name__ == "__main__":
    app()
