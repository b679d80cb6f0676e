"""Static command metadata: path, usage, synopsis and site query."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ALL_SITES_FLAG = "all-sites"


class SynopsisType(StrEnum):
    """Kinds of synopsis entries understood by the host."""

    POSITIONAL = "positional"
    ASSOC = "assoc"
    FLAG = "flag"


class SynopsisEntry(BaseModel):
    """Single argument in a command's synopsis.

    ``default`` and ``options`` apply to assoc entries and are enforced
    by the host after custom validation has run.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: SynopsisType = SynopsisType.POSITIONAL
    optional: bool = False
    description: str = ""
    default: str | None = None
    options: tuple[str, ...] | None = None
    repeating: bool = False

    @model_validator(mode="after")
    def validate_shape(self) -> "SynopsisEntry":
        """Reject combinations the host cannot interpret."""
        if self.repeating and self.type != SynopsisType.POSITIONAL:
            raise ValueError(f"Only positional entries can repeat: '{self.name}'")
        if self.options is not None and self.type == SynopsisType.FLAG:
            raise ValueError(f"Flag '{self.name}' cannot restrict options")
        return self

    def render(self) -> str:
        """Render the entry the way it appears in a usage line."""
        if self.type == SynopsisType.POSITIONAL:
            token = f"<{self.name}>..." if self.repeating else f"<{self.name}>"
        elif self.type == SynopsisType.ASSOC:
            token = f"--{self.name}=<{self.name}>"
        else:
            token = f"--{self.name}"
        return f"[{token}]" if self.optional else token


class SiteQuery(BaseModel):
    """Filter used to enumerate the sites a command fans out to.

    Default: all non-deleted sites, unbounded. ``count=True`` asks the
    directory for a number instead of a list, which cannot be iterated.
    """

    model_config = ConfigDict(frozen=True)

    exclude_deleted: bool = True
    limit: int | None = Field(default=None, ge=0)
    count: bool = False


class CommandDescriptor(BaseModel):
    """Everything the host needs to know about a command, minus behaviour.

    Created once at definition time. The only derived variant is
    :meth:`with_all_sites_flag`, which the registrar applies when
    ``allow_all_sites`` is set.
    """

    model_config = ConfigDict(frozen=True)

    path: tuple[str, ...]
    usage: str = "Wrong arguments"
    shortdesc: str = ""
    longdesc: str = ""
    synopsis: tuple[SynopsisEntry, ...] = ()
    allow_all_sites: bool = False
    site_query: SiteQuery = SiteQuery()

    @field_validator("path", mode="before")
    @classmethod
    def split_path(cls, value: object) -> object:
        """Accept ``"foo bar"`` as well as ``["foo", "bar"]``."""
        if isinstance(value, str):
            return tuple(value.split())
        return value

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("Command path must have at least one token")
        for token in value:
            if not token or any(ch.isspace() for ch in token):
                raise ValueError(f"Invalid command path token: {token!r}")
        return value

    @property
    def name(self) -> str:
        """Path joined with spaces, e.g. ``"example hello"``."""
        return " ".join(self.path)

    def with_all_sites_flag(self, flag: str = ALL_SITES_FLAG) -> "CommandDescriptor":
        """Return a copy whose synopsis advertises the optional fan-out flag."""
        if any(entry.name == flag for entry in self.synopsis):
            return self
        entry = SynopsisEntry(
            name=flag,
            type=SynopsisType.FLAG,
            optional=True,
            description="Run the command on every site of the installation.",
        )
        return self.model_copy(update={"synopsis": (*self.synopsis, entry)})
