"""Allow ``python -m registry_scout``."""
from registry_scout.cli import cli

if __name__ == "__main__":
    cli()
