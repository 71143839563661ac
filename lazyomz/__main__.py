from lazyomz.main import cli

cli()
