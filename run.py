#!/usr/bin/env python3
"""
Bank Ledger Entry Point

Starts the FastAPI server for the in-memory bank ledger.
"""

import sys

from bank_ledger.api import run_server
from bank_ledger.config import get_config
from bank_ledger.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, config.log_format)

    print("🏦 Starting Bank Ledger...")
    print("💾 All state is in memory and resets on restart")
    print(f"🌐 API available at: http://localhost:{config.api_port}")
    print(f"📚 Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server()
    except KeyboardInterrupt:
        print("\n👋 Shutting down Bank Ledger...")
    except Exception as e:
        print(f"❌ Error starting server: {e}")
        sys.exit(1)
