from webdist.cli.main import cli

cli()
