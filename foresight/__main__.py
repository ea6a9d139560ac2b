from foresight.cli import cli

cli()
