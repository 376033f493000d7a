"""Entry point for running the gatekeeper bot as a module via python -m bots"""

import asyncio

from bots.gatekeeper import main

if __name__ == "__main__":
    asyncio.run(main())
