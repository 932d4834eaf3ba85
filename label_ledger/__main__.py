from label_ledger.cli import cli

cli()
