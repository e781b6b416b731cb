"""
Variable data models.

Describes which backend table and code column back each measured variable.
"""

from dataclasses import dataclass

from ..core import constants


@dataclass(frozen=True)
class VariableConfig:
    """Backend layout of a measured variable."""

    name: str
    table: str
    code_field: str

    @property
    def supports_regions(self) -> bool:
        """Whether rows carry an aquifer-system label usable as a filter."""
        return self.code_field == "codigo"

    @property
    def select_columns(self) -> str:
        """Column projection used when loading map points."""
        if self.code_field == "localizacao":
            return "id, data, coord_x_m, coord_y_m, localizacao"
        return "id, data, coord_x_m, coord_y_m, codigo, sistema_aquifero"

    @classmethod
    def for_variable(cls, name: str) -> "VariableConfig":
        """
        Look up the configuration of an enumerated variable.

        Raises:
            ValueError: If the variable is unknown
        """
        if name not in constants.VARIABLE_TABLES:
            raise ValueError(
                f"Unknown variable '{name}'. "
                f"Available: {', '.join(sorted(constants.VARIABLE_TABLES))}"
            )
        table, code_field = constants.VARIABLE_TABLES[name]
        return cls(name=name, table=table, code_field=code_field)
