"""Crystallographic models.

This submodule defines the `CrystalInfo` model (space group, unit cell, and
non-crystallographic symmetry operators) and the `Header` model (experimental
metadata).

Exports:
    CrystalInfo: Model representing crystallographic information.
    Header: Model representing structure header metadata.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = [
    "CrystalInfo",
    "Header",
]

UNIT_CELL_LENGTH: int = 6


class CrystalInfo(BaseModel):
    """Crystallographic information.

    Attributes:
        space_group (str): Space group name, e.g. `"P 21 21 21"`.
        unit_cell (tuple[float, ...]): Unit cell parameters
            `(a, b, c, alpha, beta, gamma)`.
        ncs_operators (tuple[tuple[float, ...], ...]): Flattened
            non-crystallographic symmetry operator matrices.

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    space_group: Annotated[
        str,
        Field(
            title="space_group",
            description="Space group name.",
            validation_alias="spaceGroup",
            serialization_alias="spaceGroup",
        ),
    ] = ""

    unit_cell: Annotated[
        tuple[float, ...],
        Field(
            title="unit_cell",
            description="Unit cell parameters.",
            validation_alias="unitCell",
            serialization_alias="unitCell",
        ),
    ]

    ncs_operators: Annotated[
        tuple[tuple[float, ...], ...],
        Field(
            title="ncs_operators",
            description="Non-crystallographic symmetry operators.",
            validation_alias="ncsOperatorList",
            serialization_alias="ncsOperatorList",
        ),
    ] = ()

    @field_validator("unit_cell", mode="after")
    @classmethod
    def __validate_unit_cell(
        cls: type[Self],
        value: tuple[float, ...],
    ) -> tuple[float, ...]:
        """Ensure the unit cell has exactly six parameters.

        Raises:
            ValueError: If `value` does not hold six parameters.

        """
        if len(value) != UNIT_CELL_LENGTH:
            msg: str = (
                "Invalid unit cell: expected `(a, b, c, alpha, beta, gamma)` "
                f"(len(unit_cell)={len(value)})."
            )
            raise ValueError(msg)
        return value

    @field_validator("unit_cell", "ncs_operators", mode="before")
    @classmethod
    def __coerce_sequence(cls: type[Self], value: Any) -> Any:
        """Accept nested iterables, e.g. numpy arrays."""
        if not isinstance(value, Iterable) or isinstance(value, (str, bytes)):
            return value
        return tuple(
            tuple(item)
            if isinstance(item, Iterable) and not isinstance(item, str)
            else item
            for item in value
        )


class Header(BaseModel):
    """Structure header metadata.

    Attributes:
        r_free (float | None): R-free value.
        r_work (float | None): R-work value.
        resolution (float | None): Resolution in Å.
        title (str | None): Structure title.
        deposition_date (str | None): Deposition date (`YYYY-MM-DD`).
        release_date (str | None): Release date (`YYYY-MM-DD`).
        experimental_methods (tuple[str, ...]): Experimental methods.

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    r_free: Annotated[
        float | None,
        Field(
            title="r_free",
            description="R-free value.",
            validation_alias="rFree",
            serialization_alias="rFree",
        ),
    ] = None

    r_work: Annotated[
        float | None,
        Field(
            title="r_work",
            description="R-work value.",
            validation_alias="rWork",
            serialization_alias="rWork",
        ),
    ] = None

    resolution: Annotated[
        float | None,
        Field(
            title="resolution",
            description="Resolution in Å.",
        ),
    ] = None

    title: Annotated[
        str | None,
        Field(
            title="title",
            description="Structure title.",
        ),
    ] = None

    deposition_date: Annotated[
        str | None,
        Field(
            title="deposition_date",
            description="Deposition date.",
            validation_alias="depositionDate",
            serialization_alias="depositionDate",
        ),
    ] = None

    release_date: Annotated[
        str | None,
        Field(
            title="release_date",
            description="Release date.",
            validation_alias="releaseDate",
            serialization_alias="releaseDate",
        ),
    ] = None

    experimental_methods: Annotated[
        tuple[str, ...],
        Field(
            title="experimental_methods",
            description="Experimental methods.",
            validation_alias="experimentalMethods",
            serialization_alias="experimentalMethods",
        ),
    ] = ()
