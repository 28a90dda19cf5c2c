"""Run-aborting error types.

Per-entity problems (unresolved tables, failed column queries) are reported
as warnings and never raise; everything here stops the whole run.
"""


class Db2CrudError(Exception):
    """Base class for fatal db2crud errors."""


class ConfigError(Db2CrudError):
    """Raised when options or the config file are invalid."""


class MissingEnvironmentVariableError(ConfigError):
    """Raised when a connection value references an unset env var."""


class UnsupportedProviderError(Db2CrudError):
    """Raised when no registered provider family matches the identifier."""


class ModelSourceNotFoundError(Db2CrudError):
    """Raised when the DbContext source file cannot be read."""


class TemplateBindingError(Db2CrudError):
    """Raised when a template references a field the model does not define."""

    def __init__(self, template_name: str, message: str) -> None:
        self.template_name = template_name
        super().__init__(f"Template '{template_name}': {message}")
