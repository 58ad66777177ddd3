"""Allow ``python -m interchange``."""

from interchange.cli.main import app

app()
