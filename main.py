#!/usr/bin/env python3
"""
Convenience launcher: ``python main.py -c ircbot.json``
"""

from ircbot.main import run

if __name__ == "__main__":
    run()
