"""Chain and model models.

This submodule defines the `Chain` model, an ordered sequence of groups, and
the `Model` model, an ordered sequence of chains.

Exports:
    Chain: Model representing a chain of groups.
    Model: Model representing one model (conformer set) of a structure.
"""

from __future__ import annotations

from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field

from .group import Group

__all__: list[str] = [
    "Chain",
    "Model",
]


class Chain(BaseModel):
    """Chain record.

    A chain carries two identifiers: `chain_id`, the short internal
    identifier (one to four characters), and `chain_name`, the public chain
    identifier shown to users.

    Attributes:
        chain_id (str): Internal chain identifier.
        chain_name (str): Public chain identifier.
        groups (tuple[Group, ...]): Groups of the chain in order.

    Examples:
        Chain with a single water.
        ```python
        Chain(chain_id="C", chain_name="A", groups=[water])
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    chain_id: Annotated[
        str,
        Field(
            title="chain_id",
            description="Internal chain identifier.",
            validation_alias="chainId",
            serialization_alias="chainId",
        ),
    ]

    chain_name: Annotated[
        str,
        Field(
            title="chain_name",
            description="Public chain identifier.",
            validation_alias="chainName",
            serialization_alias="chainName",
        ),
    ]

    groups: Annotated[
        tuple[Group, ...],
        Field(
            title="groups",
            description="Groups of the chain in order.",
        ),
    ] = ()

    @property
    def group_count(self: Self) -> int:
        """Number of groups in the chain."""
        return len(self.groups)


class Model(BaseModel):
    """Model record.

    Models are identified by position: the first model of a structure has
    `model_id` 0.

    Attributes:
        chains (tuple[Chain, ...]): Chains of the model in order.

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    chains: Annotated[
        tuple[Chain, ...],
        Field(
            title="chains",
            description="Chains of the model in order.",
        ),
    ] = ()

    @property
    def chain_count(self: Self) -> int:
        """Number of chains in the model."""
        return len(self.chains)
