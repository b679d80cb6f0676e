"""In-process host: argv parsing, command resolution and hook firing.

Argv conventions::

    site-commands <command path...> <positional...> [--key=value] [--flag]
                  [--no-flag] [--debug] [-- <positional...>]

``--flag`` becomes ``True`` and ``--no-flag`` becomes ``False`` in the
assoc args. ``--debug`` is a global option: it is removed from the assoc
args, exposed as ``options["debug"]`` and lowers the log level.
"""

from __future__ import annotations

import logging
import sys
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TextIO

import structlog

from site_commands.descriptor import SynopsisEntry, SynopsisType
from site_commands.errors import FatalCommandError, HandlerError
from site_commands.hooks import InvokeFn, InvokeHookFn
from site_commands.host.base import BEFORE_RUN_COMMAND, HookCallback

logger = structlog.get_logger()

PROGRAM = "site-commands"
GLOBAL_OPTIONS: frozenset[str] = frozenset({"debug"})


@dataclass
class ParsedArgs:
    """Result of splitting argv into positional args, assoc args and options."""

    args: list[str] = field(default_factory=list)
    assoc_args: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)


def parse_argv(argv: Sequence[str]) -> ParsedArgs:
    """Split argv the way the host hands it to commands."""
    parsed = ParsedArgs()
    positional_only = False
    for token in argv:
        if positional_only or not token.startswith("--"):
            parsed.args.append(token)
            continue
        if token == "--":
            positional_only = True
            continue

        key, sep, value = token[2:].partition("=")
        target = parsed.options if key in GLOBAL_OPTIONS else parsed.assoc_args
        if sep:
            target[key] = value
        elif key.startswith("no-"):
            target[key[3:]] = False
        else:
            target[key] = True
    return parsed


@dataclass(frozen=True)
class CommandEntry:
    """A command as registered with the host."""

    path: tuple[str, ...]
    invoke: InvokeFn
    before_invoke: InvokeHookFn | None = None
    after_invoke: InvokeHookFn | None = None
    shortdesc: str = ""
    longdesc: str = ""
    synopsis: tuple[SynopsisEntry, ...] = ()

    @property
    def name(self) -> str:
        return " ".join(self.path)

    def usage_line(self) -> str:
        return " ".join([PROGRAM, self.name, *(e.render() for e in self.synopsis)])


class LocalHost:
    """Reference host that runs registered commands inside this process.

    The invoke wrappers of a command are attached to every level of its
    path, so a command at ``foo bar`` gets ``before_invoke`` and
    ``after_invoke`` called twice per run. Commands must tolerate this.
    """

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._commands: dict[tuple[str, ...], CommandEntry] = {}
        self._hooks: defaultdict[str, list[HookCallback]] = defaultdict(list)
        self._out = out
        self._err = err

    # -- registration ---------------------------------------------------

    def add_command(
        self,
        path: Sequence[str],
        invoke: InvokeFn,
        *,
        before_invoke: InvokeHookFn | None = None,
        after_invoke: InvokeHookFn | None = None,
        shortdesc: str = "",
        longdesc: str = "",
        synopsis: Sequence[SynopsisEntry] = (),
    ) -> None:
        key = tuple(path)
        if key in self._commands:
            raise ValueError(f"Command already registered: '{' '.join(key)}'")
        self._commands[key] = CommandEntry(
            path=key,
            invoke=invoke,
            before_invoke=before_invoke,
            after_invoke=after_invoke,
            shortdesc=shortdesc,
            longdesc=longdesc,
            synopsis=tuple(synopsis),
        )
        logger.debug("command_added", command=" ".join(key))

    def add_hook(self, event: str, callback: HookCallback) -> None:
        self._hooks[event].append(callback)

    def do_hook(self, event: str, *args: Any) -> None:
        for callback in self._hooks[event]:
            callback(*args)

    @property
    def commands(self) -> list[CommandEntry]:
        return sorted(self._commands.values(), key=lambda entry: entry.path)

    # -- output ---------------------------------------------------------

    @property
    def out(self) -> TextIO:
        return self._out or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err or sys.stderr

    def log(self, message: str) -> None:
        print(message, file=self.out)

    def success(self, message: str) -> None:
        print(f"Success: {message}", file=self.out)

    def error_line(self, message: str) -> None:
        print(f"Error: {message}", file=self.err)

    # -- execution ------------------------------------------------------

    def run(self, argv: Sequence[str]) -> int:
        """Execute one command attempt and return the process exit code."""
        parsed = parse_argv(argv)
        root_logger = logging.getLogger()
        previous_level = root_logger.level
        if parsed.options.get("debug"):
            root_logger.setLevel(logging.DEBUG)

        try:
            return self._execute(parsed)
        except FatalCommandError as exc:
            self.error_line(str(exc))
            return exc.exit_code
        except HandlerError as exc:
            logger.warning("command_failed", error=str(exc))
            self.error_line(str(exc))
            return 1
        finally:
            root_logger.setLevel(previous_level)

    def resolve(self, args: Sequence[str]) -> CommandEntry | None:
        """Longest registered path that prefixes ``args``."""
        for size in range(len(args), 0, -1):
            entry = self._commands.get(tuple(args[:size]))
            if entry is not None:
                return entry
        return None

    def _execute(self, parsed: ParsedArgs) -> int:
        args = parsed.args
        if not args or args[0] == "help":
            self._print_help(args[1:])
            return 0

        entry = self.resolve(args)
        if entry is None:
            raise FatalCommandError(f"'{' '.join(args)}' is not a registered command.")

        self.do_hook(BEFORE_RUN_COMMAND, list(args), parsed.assoc_args, parsed.options)

        actual_args = list(args[len(entry.path) :])
        assoc_args = self._check_synopsis(entry, actual_args, dict(parsed.assoc_args))

        # One firing per tree level, root first.
        for _ in entry.path:
            if entry.before_invoke is not None:
                entry.before_invoke()
        entry.invoke(actual_args, assoc_args)
        for _ in entry.path:
            if entry.after_invoke is not None:
                entry.after_invoke()
        return 0

    def _check_synopsis(
        self,
        entry: CommandEntry,
        args: list[str],
        assoc_args: dict[str, Any],
    ) -> dict[str, Any]:
        """Apply defaults and enforce the synopsis; unknown assoc args pass through."""
        if not entry.synopsis:
            return assoc_args

        usage = f"Usage: {entry.usage_line()}"
        positionals = [e for e in entry.synopsis if e.type == SynopsisType.POSITIONAL]
        required = sum(1 for e in positionals if not e.optional)
        repeating = any(e.repeating for e in positionals)
        if len(args) < required:
            raise FatalCommandError(usage)
        if not repeating and len(args) > len(positionals):
            raise FatalCommandError(usage)

        for item in entry.synopsis:
            if item.type == SynopsisType.POSITIONAL:
                continue
            if item.name not in assoc_args and item.default is not None:
                assoc_args[item.name] = item.default
            if item.type != SynopsisType.ASSOC:
                continue
            if item.name not in assoc_args:
                if not item.optional:
                    raise FatalCommandError(f"Missing --{item.name}. {usage}")
                continue
            value = assoc_args[item.name]
            if item.options is not None and value not in item.options:
                raise FatalCommandError(
                    f"Invalid value for --{item.name}: {value!r}. "
                    f"Expected one of: {', '.join(item.options)}"
                )
        return assoc_args

    def _print_help(self, path: Sequence[str]) -> None:
        entry = self.resolve(path) if path else None
        if entry is None:
            self.log(f"usage: {PROGRAM} <command> [<args>...] [--debug]")
            self.log("")
            self.log("Commands:")
            width = max((len(e.name) for e in self.commands), default=0)
            for command in self.commands:
                self.log(f"  {command.name.ljust(width)}  {command.shortdesc}")
            return

        self.log(entry.shortdesc or entry.name)
        self.log("")
        self.log(f"usage: {entry.usage_line()}")
        if entry.longdesc:
            self.log("")
            self.log(entry.longdesc)
        if entry.synopsis:
            self.log("")
            self.log("Options:")
            for item in entry.synopsis:
                self.log(f"  {item.render()}")
                if item.description:
                    self.log(f"      {item.description}")
                if item.default is not None:
                    self.log(f"      default: {item.default}")
                if item.options is not None:
                    self.log(f"      options: {', '.join(item.options)}")
