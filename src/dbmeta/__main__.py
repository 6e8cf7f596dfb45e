from dbmeta.cli.commands import run

run()
