"""Script entry point for the gatekeeper bot."""

from __future__ import annotations

import asyncio

from bots.gatekeeper import main

if __name__ == "__main__":
    asyncio.run(main())
