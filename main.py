#!/usr/bin/env python3
"""
Main entry point for the Habit Tracker bot
"""

import asyncio
import logging
import sys

from app.bot import main


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Bot stopped")
    except Exception as e:
        logging.error(f"Bot crashed with error: {e}")
        sys.exit(1)
