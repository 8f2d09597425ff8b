"""
Palworld Power Bot — Entry Point

Thin wrapper that delegates to bot/client.py.

To run: python orchestration/main.py
   or:  python -m bot.client
"""

import os
import sys

# Running as a script puts orchestration/ first on sys.path; the packages live one level up
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bot.client import run

if __name__ == "__main__":
    run()
