"""
db2crud

Generates CRUD API layers (controllers, interfaces, services, DTOs and
dependency-injection wiring) for an ASP.NET Core project from an EF Core
DbContext and the live database schema behind it.
"""

__version__ = "0.1.0"

from db2crud.core.runner import run_generation
from db2crud.cli.commands import cli

__all__ = [
    "cli",
    "run_generation",
]
