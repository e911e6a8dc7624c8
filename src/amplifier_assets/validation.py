"""Validation of server parameter values against installer descriptors."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .installer import InstallerDescriptor


class ViolationCode(IntEnum):
    NO_SUCH_PARAMETER = 1
    MISSING_PARAMETER = 2


@dataclass(frozen=True)
class ConstraintViolation:
    """A parameter value that does not fit the installer."""

    code: ViolationCode
    invalid_value: Any
    installer_name: str
    parameter_name: str | None = None


class InstallerParameterValidator:
    """Checks parameter values for undeclared and missing parameters."""

    def validate(self, parameter_values: dict[str, Any], descriptor: InstallerDescriptor) -> list[ConstraintViolation]:
        """
        Validate parameter values against an installer descriptor.

        Args:
            parameter_values: Values keyed by parameter name
            descriptor: Installer whose parameters are checked

        Returns:
            Violations, undeclared parameters first, then missing required ones
        """
        violations = []

        for name, value in parameter_values.items():
            if not descriptor.has_parameter(name):
                violations.append(
                    ConstraintViolation(ViolationCode.NO_SUCH_PARAMETER, value, descriptor.name, name)
                )

        for parameter in descriptor.parameters.values():
            if parameter.required and parameter_values.get(parameter.name) is None:
                violations.append(
                    ConstraintViolation(ViolationCode.MISSING_PARAMETER, parameter_values, descriptor.name, parameter.name)
                )

        return violations
