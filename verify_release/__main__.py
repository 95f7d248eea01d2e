from verify_release.main import cli

cli()
