"""Discord runtime for the gatekeeper bot.

`bots.gatekeeper` builds the client and command tree and forwards Discord
events to :mod:`gatekeeper.workflow`; `bots.config` reads the environment.
"""

__all__ = ["config", "gatekeeper"]
