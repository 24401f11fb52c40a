"""Bioassembly models.

This submodule defines the `BioAssembly` model, which describes how copies
of chains are generated by spatial transforms to build a biological
assembly, and the `Transform` model for a single transform operation.

Exports:
    BioAssembly: Model representing a biological assembly.
    Transform: Model representing a transform applied to a set of chains.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = [
    "BioAssembly",
    "Transform",
]


class Transform(BaseModel):
    """Transform operation of a bioassembly.

    Pairs a set of chains, referenced by global chain index, with an affine
    transform stored as a flat list of doubles (4x4, or 3x4).

    Attributes:
        chain_indices (tuple[int, ...]): Global indexes of the chains.
        matrix (tuple[float, ...]): Flattened transform matrix.

    Examples:
        Identity applied to the first two chains.
        ```python
        Transform(
            chain_indices=[0, 1],
            matrix=[1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1],
        )
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    chain_indices: Annotated[
        tuple[int, ...],
        Field(
            title="chain_indices",
            description="Global indexes of the chains.",
            validation_alias="chainIndexList",
            serialization_alias="chainIndexList",
        ),
    ] = ()

    matrix: Annotated[
        tuple[float, ...],
        Field(
            title="matrix",
            description="Flattened transform matrix.",
        ),
    ] = ()

    @field_validator("chain_indices", "matrix", mode="before")
    @classmethod
    def __coerce_sequence(cls: type[Self], value: Any) -> Any:
        """Accept any iterable, e.g. a numpy array."""
        if not isinstance(value, Iterable) or isinstance(value, (str, bytes)):
            return value
        return tuple(value)


class BioAssembly(BaseModel):
    """Biological assembly.

    Bioassemblies are identified by their position in the structure-wide
    list.

    Attributes:
        name (str): Assembly name.
        transforms (tuple[Transform, ...]): Transform operations.

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    name: Annotated[
        str,
        Field(
            title="name",
            description="Assembly name.",
        ),
    ] = ""

    transforms: Annotated[
        tuple[Transform, ...],
        Field(
            title="transforms",
            description="Transform operations.",
            validation_alias="transformList",
            serialization_alias="transformList",
        ),
    ] = ()
