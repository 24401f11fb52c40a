"""Atom model.

This submodule defines the `Atom` model, the leaf of the structure graph.

Exports:
    Atom: Model representing a single atom of a group.
"""

from __future__ import annotations

from typing import Annotated, Self

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = [
    "Atom",
]


class Atom(BaseModel):
    """Atom record.

    Atoms are globally indexed in traversal order (models, chains, groups,
    atoms); that global index is what inter-group bonds refer to. Floating
    fields are stored at IEEE-754 single precision.

    Attributes:
        atom_name (str): Atom name, unique within its group per alternate
            location.
        serial_number (int): Author-facing atom serial number.
        alternative_location_id (str): Alternate location identifier, `""`
            if none.
        x (float): Cartesian x coordinate.
        y (float): Cartesian y coordinate.
        z (float): Cartesian z coordinate.
        occupancy (float): Atomic occupancy.
        temperature_factor (float): Isotropic B factor.
        element (str): Chemical element symbol.
        charge (int): Formal charge.

    Examples:
        Alpha carbon.
        ```python
        Atom(
            atom_name="CA",
            serial_number=2,
            x=26.266,
            y=25.413,
            z=2.842,
            element="C",
        )
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    atom_name: Annotated[
        str,
        Field(
            title="atom_name",
            description="Atom name.",
            validation_alias="atomName",
            serialization_alias="atomName",
        ),
    ]

    serial_number: Annotated[
        int,
        Field(
            title="serial_number",
            description="Author-facing atom serial number.",
            validation_alias="serialNumber",
            serialization_alias="serialNumber",
        ),
    ]

    alternative_location_id: Annotated[
        str,
        Field(
            title="alternative_location_id",
            description="Alternate location identifier.",
            validation_alias="altLoc",
            serialization_alias="altLoc",
        ),
    ] = ""

    x: Annotated[float, Field(title="x", description="Cartesian x.")]

    y: Annotated[float, Field(title="y", description="Cartesian y.")]

    z: Annotated[float, Field(title="z", description="Cartesian z.")]

    occupancy: Annotated[
        float,
        Field(
            title="occupancy",
            description="Atomic occupancy.",
        ),
    ] = 1.0

    temperature_factor: Annotated[
        float,
        Field(
            title="temperature_factor",
            description="Isotropic B factor.",
            validation_alias="bFactor",
            serialization_alias="bFactor",
        ),
    ] = 0.0

    element: Annotated[
        str,
        Field(
            title="element",
            description="Chemical element symbol.",
        ),
    ]

    charge: Annotated[
        int,
        Field(
            title="charge",
            description="Formal charge.",
        ),
    ] = 0

    @field_validator(
        "x",
        "y",
        "z",
        "occupancy",
        "temperature_factor",
        mode="after",
    )
    @classmethod
    def __single_precision(cls: type[Self], value: float) -> float:
        """Round floating fields to IEEE-754 single precision."""
        return float(np.float32(value))

    @property
    def coordinates(self: Self) -> tuple[float, float, float]:
        """Cartesian coordinates as an `(x, y, z)` tuple."""
        return (self.x, self.y, self.z)
