"""Host runtime contract and the in-process reference host."""

from site_commands.host.base import BEFORE_RUN_COMMAND, CommandHost
from site_commands.host.local import LocalHost, parse_argv

__all__ = ["BEFORE_RUN_COMMAND", "CommandHost", "LocalHost", "parse_argv"]
