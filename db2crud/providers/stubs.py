"""Registered but unimplemented provider families."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

if TYPE_CHECKING:
    from db2crud.helpers.helpers_logging import Reporter


def postgres_provider(connection: str, reporter: Reporter) -> NoReturn:
    raise NotImplementedError("Postgres schema reader not implemented yet.")


def mysql_provider(connection: str, reporter: Reporter) -> NoReturn:
    raise NotImplementedError("MySql schema reader not implemented yet.")
