from bios_updater.cli import cli

cli()
