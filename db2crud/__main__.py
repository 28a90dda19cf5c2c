"""Allow ``python -m db2crud``."""

from db2crud.cli.commands import main

main()
