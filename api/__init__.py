"""
API Package for URL Keep-Alive

The command/query surface and the aiohttp server that exposes it.
"""

from api.commands import CommandHandler, CommandOutcome, build_state_payload
from api.server import ApiServer

__all__ = [
    "CommandHandler",
    "CommandOutcome",
    "build_state_payload",
    "ApiServer",
]
