"""Bond models.

This submodule defines the `GroupBond` and `InterGroupBond` models for
specifying bonds between atoms of a structure.

Exports:
    Bond: Base model representing a bond between two atom indexes.
    GroupBond: Bond between two atoms of the same group (local indexes).
    InterGroupBond: Bond between two atoms anywhere in the structure (global
        indexes).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_serializer,
    model_validator,
)

__all__: list[str] = [
    "Bond",
    "GroupBond",
    "InterGroupBond",
]


class Bond(BaseModel):
    """Bond between two atom indexes.

    Attributes:
        atom_index_one (int): Index of the first bond partner.
        atom_index_two (int): Index of the second bond partner.
        bond_order (int): Bond order (1 single, 2 double, 3 triple, ...).

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_assignment=False,
        validate_by_name=True,
        validate_by_alias=True,
    )

    atom_index_one: Annotated[
        int,
        Field(
            title="atom_index_one",
            description="Index of the first bond partner.",
            ge=0,
            validation_alias="atomIndexOne",
            serialization_alias="atomIndexOne",
        ),
    ]

    atom_index_two: Annotated[
        int,
        Field(
            title="atom_index_two",
            description="Index of the second bond partner.",
            ge=0,
            validation_alias="atomIndexTwo",
            serialization_alias="atomIndexTwo",
        ),
    ]

    bond_order: Annotated[
        int,
        Field(
            title="bond_order",
            description="Bond order.",
            validation_alias="bondOrder",
            serialization_alias="bondOrder",
        ),
    ] = 1

    @model_validator(mode="before")
    @classmethod
    def __validate_model(cls: type[Self], data: Any) -> Any:
        """Coerce compact bond definitions to a mapping.

        Accepts the list form `[atom_index_one, atom_index_two, bond_order]`
        and converts it to a mapping compatible with field validation.

        Args:
            data (Any): Raw input data.

        Returns:
            out (Any): Mapping with keys `atom_index_one`, `atom_index_two`,
                and `bond_order` when `data` is a sequence, otherwise the
                original input.

        Raises:
            ValueError: If `data` is a sequence but does not have exactly
                three items.

        """
        if not isinstance(data, Sequence) or isinstance(
            data,
            (str, bytes, bytearray),
        ):
            return data

        if len(data) != len(cls.model_fields):
            msg: str = (
                "Invalid bond definition: expected "
                "`[atom_index_one, atom_index_two, bond_order]`."
            )
            raise ValueError(msg)
        return {
            "atom_index_one": data[0],
            "atom_index_two": data[1],
            "bond_order": data[2],
        }

    @model_serializer(mode="plain")
    def __serialize_model(self: Self) -> tuple[int, int, int]:
        """Serialize bond as `[atom_index_one, atom_index_two, bond_order]`.

        Returns:
            out (tuple[int, int, int]): Compact bond representation.

        """
        return (self.atom_index_one, self.atom_index_two, self.bond_order)


class GroupBond(Bond):
    """Intra-group bond.

    Both atom indexes are local to the owning group: `0` is the first atom of
    the group, and both must be below the group's atom count.

    Examples:
        Peptide backbone N-CA bond.
        ```python
        GroupBond(atom_index_one=0, atom_index_two=1, bond_order=1)
        ```

    """


class InterGroupBond(Bond):
    """Inter-group bond.

    Both atom indexes are global (traversal order over the whole structure),
    and both must be below the structure's atom count.

    Examples:
        Peptide bond between atom 2 (C of residue 1) and atom 6 (N of
        residue 2).
        ```python
        InterGroupBond.model_validate([2, 6, 1])
        ```

    """
