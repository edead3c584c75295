#!/usr/bin/env python3
"""
Expense Tracker Entry Point

Starts the FastAPI server. Host, port and everything else come from
EXPENSES_* environment variables or a .env file.
"""

import sys

from expense_tracker.api import run_server
from expense_tracker.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting Expense Tracker API...")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()
    
    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down Expense Tracker API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
