"""``example hello``: greets someone, optionally on every site."""

from __future__ import annotations

from typing import Protocol

from site_commands.descriptor import CommandDescriptor, SynopsisEntry, SynopsisType
from site_commands.errors import HandlerError
from site_commands.hooks import Args, AssocArgs, Options
from site_commands.registrar import CommandRegistrar, RegisteredCommand
from site_commands.sites.base import SiteDirectory

MIN_NAME_LENGTH = 4

DESCRIPTOR = CommandDescriptor(
    path=("example", "hello"),
    usage=f"The name must be at least {MIN_NAME_LENGTH} characters long",
    shortdesc="Prints a greeting.",
    longdesc=(
        "Examples:\n\n"
        "    site-commands example hello Newman\n"
        "    site-commands example hello Newman --all-sites"
    ),
    synopsis=(
        SynopsisEntry(
            name="name",
            description=(
                f"The name of the person to greet; at least "
                f"{MIN_NAME_LENGTH} characters."
            ),
        ),
        SynopsisEntry(
            name="type",
            type=SynopsisType.ASSOC,
            optional=True,
            default="success",
            options=("success", "error"),
            description="Whether to greet the person with success or error.",
        ),
    ),
    allow_all_sites=True,
)


class Output(Protocol):
    def success(self, message: str) -> None: ...


class HelloCommand:
    def __init__(self, output: Output, sites: SiteDirectory) -> None:
        self._output = output
        self._sites = sites

    def invoke(self, args: Args, assoc_args: AssocArgs) -> None:
        name = args[0]
        site = self._sites.current_site()
        greeting = f"Hello, {name}!"
        if site is not None:
            greeting = f"Hello, {name} from {site.name}!"
        if assoc_args.get("type") == "error":
            raise HandlerError(greeting)
        self._output.success(greeting)

    def validate(self, args: Args, assoc_args: AssocArgs, options: Options) -> bool:
        """Restrict <name> to more than 3 characters.

        A missing name is left to the host's synopsis check.
        """
        name = args[0] if args else None
        return not (name and len(name) < MIN_NAME_LENGTH)


def register(
    registrar: CommandRegistrar, output: Output, sites: SiteDirectory
) -> RegisteredCommand | None:
    return registrar.register(DESCRIPTOR, HelloCommand(output, sites))
