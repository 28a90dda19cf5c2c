"""User-editable template directory seeded from the packaged defaults."""

from __future__ import annotations

import shutil
from pathlib import Path

DEFAULT_TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

CONTROLLER_TEMPLATE = "Controller.j2"
INTERFACE_TEMPLATE = "Interface.j2"
SERVICE_TEMPLATE = "Service.j2"
DTOS_TEMPLATE = "Dtos.j2"
DI_TEMPLATE = "DiRegistration.j2"

TEMPLATE_NAMES: tuple[str, ...] = (
    CONTROLLER_TEMPLATE,
    INTERFACE_TEMPLATE,
    SERVICE_TEMPLATE,
    DTOS_TEMPLATE,
    DI_TEMPLATE,
)


class TemplateRepository:
    """Directory holding the five generation templates.

    Args:
        directory: Template directory.
        create: Create ``directory`` if missing. Dry runs pass ``False`` so
            nothing is written.
    """

    def __init__(self, directory: Path | str = "Templates", create: bool = True) -> None:
        self.directory = Path(directory)
        if create:
            self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, name: str) -> Path:
        return self.directory / name

    def write_defaults_if_missing(self) -> list[Path]:
        """Copy packaged defaults for templates not present yet.

        Returns:
            Paths that were written.
        """
        written: list[Path] = []
        for name in TEMPLATE_NAMES:
            target = self.path_for(name)
            if not target.exists():
                shutil.copyfile(DEFAULT_TEMPLATES_DIR / name, target)
                written.append(target)
        return written

    def write_all_defaults(self) -> list[Path]:
        """Overwrite every template with the packaged default."""
        written: list[Path] = []
        for name in TEMPLATE_NAMES:
            target = self.path_for(name)
            shutil.copyfile(DEFAULT_TEMPLATES_DIR / name, target)
            written.append(target)
        return written
