from interncli.cli.main import cli

cli()
