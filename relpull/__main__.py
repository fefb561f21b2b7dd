"""Allow ``python -m relpull``."""

from relpull.main import cli

cli()
