"""Installer descriptors - metadata about resource installer implementations."""

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator

from .exceptions import NoSuchParameterError

ParameterValue = str | int | float | bool | None


class InstallerParameter(BaseModel):
    """
    A parameter accepted by an installer.

    Required parameters must be set by every server using the installer and
    therefore cannot have a default value.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(pattern=r"^[a-zA-Z][a-zA-Z0-9\-_]*$")
    required: bool = False
    default_value: ParameterValue = None
    description: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def _check_required_without_default(self) -> "InstallerParameter":
        if self.required and self.default_value is not None:
            raise ValueError("Required parameters cannot have default values.")
        return self


class InstallerDescriptor(BaseModel):
    """
    Describes a resource installer.

    ``class_name`` is only resolved when the installer is used (see
    ``InstallerLoader``). Parameters keep their declaration order.

    Example:
        >>> descriptor = InstallerDescriptor(
        ...     name="symlink",
        ...     class_name="amplifier_assets.installers.SymlinkInstaller",
        ...     parameters=[InstallerParameter(name="relative", default_value=True)],
        ... )
        >>> descriptor.get_parameter_values()
        {'relative': True}
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    class_name: str = Field(min_length=1)
    description: str | None = Field(default=None, min_length=1)
    parameters: dict[str, InstallerParameter] = Field(default_factory=dict)

    @field_validator("parameters", mode="before")
    @classmethod
    def _index_parameters(cls, value):
        if isinstance(value, list | tuple):
            return {parameter.name: parameter for parameter in value}
        return value

    def get_parameter(self, parameter_name: str) -> InstallerParameter:
        if parameter_name not in self.parameters:
            raise NoSuchParameterError(parameter_name, self.name)
        return self.parameters[parameter_name]

    def has_parameter(self, parameter_name: str) -> bool:
        return parameter_name in self.parameters

    def has_parameters(self) -> bool:
        return bool(self.parameters)

    def has_required_parameters(self) -> bool:
        return any(parameter.required for parameter in self.parameters.values())

    def has_optional_parameters(self) -> bool:
        return any(not parameter.required for parameter in self.parameters.values())

    def get_parameter_values(self) -> dict[str, ParameterValue]:
        """Return the default values of all optional parameters."""
        return {name: parameter.default_value for name, parameter in self.parameters.items() if not parameter.required}

    def get_parameter_value(self, parameter_name: str) -> ParameterValue:
        return self.get_parameter(parameter_name).default_value

    def has_parameter_value(self, parameter_name: str) -> bool:
        return self.has_parameter(parameter_name) and not self.parameters[parameter_name].required
