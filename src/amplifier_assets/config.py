"""Project settings - read the [tool.amplifier.assets] table of pyproject.toml.

Per AGENTS.md: Ruthless simplicity - use standard library (tomllib), minimal fields.
"""

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class AssetsSettings(BaseModel):
    """
    Asset settings of a project.

    Convention over configuration: every field has a default, the table in
    pyproject.toml is optional.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    project_file: str = Field(default="amplifier-assets.json", alias="project-file")
    resource_dir: str = Field(default="res", alias="resource-dir")
    name: str = "root"

    @classmethod
    def from_pyproject(cls, pyproject_path: Path) -> "AssetsSettings":
        """
        Load settings from pyproject.toml.

        Args:
            pyproject_path: Path to pyproject.toml file

        Returns:
            AssetsSettings instance (defaults if the file or table is missing)

        Raises:
            tomllib.TOMLDecodeError: If invalid TOML
            pydantic.ValidationError: If the table has invalid values
        """
        if not pyproject_path.exists():
            return cls()

        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)

        settings = dict(data.get("tool", {}).get("amplifier", {}).get("assets", {}))

        # Scope name defaults to the project name
        project_name = data.get("project", {}).get("name")
        if project_name and "name" not in settings:
            settings["name"] = project_name

        return cls.model_validate(settings)
