"""Allow ``python -m site_commands``."""

from site_commands.cli import main

raise SystemExit(main())
