"""Entity model.

This submodule defines the `Entity` model, a biological or chemical identity
shared by one or more chains, and the `EntityType` enum.

Exports:
    Entity: Model representing an entity annotation over chains.
    EntityType: Enum selecting the entity type.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = [
    "Entity",
    "EntityType",
]


class EntityType(StrEnum):
    """Entity type.

    Members:
        POLYMER: Polymer entity (`"polymer"`).
        NON_POLYMER: Non-polymer entity (`"non-polymer"`).
        WATER: Water entity (`"water"`).

    """

    POLYMER = "polymer"
    NON_POLYMER = "non-polymer"
    WATER = "water"

    @classmethod
    def _missing_(cls: type[Self], value: object) -> Self | None:
        if isinstance(value, str):
            lowered: str = value.lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Entity(BaseModel):
    """Entity annotation.

    An entity does not own chains: it refers to them by their global index
    (traversal order over all models). Many chains, e.g. copies of the same
    protein, may share one entity; a chain belongs to at most one entity.

    Attributes:
        chain_indices (tuple[int, ...]): Global indexes of the chains.
        sequence (str): One-letter sequence, `""` for non-polymers.
        description (str): Free-text description.
        type (EntityType): Entity type.

    Examples:
        Homodimer.
        ```python
        Entity(
            chain_indices=[0, 1],
            sequence="MQIFVKTL",
            description="UBIQUITIN",
            type="polymer",
        )
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
        use_enum_values=False,
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

    sequence: Annotated[
        str,
        Field(
            title="sequence",
            description="One-letter sequence.",
        ),
    ] = ""

    description: Annotated[
        str,
        Field(
            title="description",
            description="Free-text description.",
        ),
    ] = ""

    type: Annotated[
        EntityType,
        Field(
            title="type",
            description="Entity type.",
        ),
    ]

    @field_validator("chain_indices", mode="before")
    @classmethod
    def __coerce_indices(cls: type[Self], value: Any) -> Any:
        """Accept any iterable of indexes, e.g. a numpy array."""
        if not isinstance(value, Iterable) or isinstance(value, (str, bytes)):
            return value
        return tuple(int(index) for index in value)
