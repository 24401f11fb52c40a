"""Column encoding configuration.

This submodule defines the `FieldCodec` and `CodecConfig` models, which
select the binary encoding strategy (and its parameter) used for each column
when a structure is serialized.

The defaults follow the recommended per-field strategies. Scale factors for
the integer-scaled floating columns are fixed and documented here:

- coordinates (`xCoordList`, `yCoordList`, `zCoordList`): 1000
- temperature factors (`bFactorList`): 100
- occupancies (`occupancyList`): 100

Exports:
    FieldCodec: Model representing a strategy and its parameter.
    CodecConfig: Model mapping column names to their `FieldCodec`.
    DEFAULT_CODECS: Recommended strategy for every binary column.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .codec import Strategy

__all__: list[str] = [
    "DEFAULT_CODECS",
    "CodecConfig",
    "FieldCodec",
]


class FieldCodec(BaseModel):
    """Binary encoding of a single column.

    Attributes:
        strategy (Strategy): Encoding strategy.
        parameter (int): Strategy parameter (divisor or string width).

    Examples:
        Coordinates at 1/1000 Å precision.
        ```python
        FieldCodec(strategy=Strategy.INTEGER_DELTA_RECURSIVE, parameter=1000)
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    strategy: Annotated[
        Strategy,
        Field(
            title="strategy",
            description="Encoding strategy.",
        ),
    ]

    parameter: Annotated[
        int,
        Field(
            title="parameter",
            description="Strategy parameter (divisor or string width).",
            ge=0,
        ),
    ] = 0

    @model_validator(mode="before")
    @classmethod
    def __validate_model(cls: type[Self], data: Any) -> Any:
        """Coerce compact `(strategy, parameter)` pairs to a mapping."""
        if isinstance(data, tuple):
            if len(data) != len(cls.model_fields):
                msg: str = (
                    "Invalid field codec: expected `(strategy, parameter)`."
                )
                raise ValueError(msg)
            return {"strategy": data[0], "parameter": data[1]}
        return data


DEFAULT_CODECS: Mapping[str, FieldCodec] = {
    name: FieldCodec.model_validate(pair)
    for name, pair in {
        "xCoordList": (Strategy.INTEGER_DELTA_RECURSIVE, 1000),
        "yCoordList": (Strategy.INTEGER_DELTA_RECURSIVE, 1000),
        "zCoordList": (Strategy.INTEGER_DELTA_RECURSIVE, 1000),
        "bFactorList": (Strategy.INTEGER_DELTA_RECURSIVE, 100),
        "occupancyList": (Strategy.INTEGER_RUN_LENGTH, 100),
        "atomIdList": (Strategy.DELTA_RUN_LENGTH_INT32, 0),
        "altLocList": (Strategy.RUN_LENGTH_CHAR, 0),
        "insCodeList": (Strategy.RUN_LENGTH_CHAR, 0),
        "groupIdList": (Strategy.DELTA_RUN_LENGTH_INT32, 0),
        "groupTypeList": (Strategy.INT32, 0),
        "secStructList": (Strategy.INT8, 0),
        "sequenceIndexList": (Strategy.DELTA_RUN_LENGTH_INT32, 0),
        "chainIdList": (Strategy.STRING, 4),
        "chainNameList": (Strategy.STRING, 4),
        "groupsPerChain": (Strategy.INT32, 0),
        "chainsPerModel": (Strategy.INT32, 0),
        "bondAtomList": (Strategy.INT32, 0),
        "bondOrderList": (Strategy.INT8, 0),
    }.items()
}


class CodecConfig(BaseModel):
    """Per-column encoding configuration.

    Columns missing from `codecs` fall back to `DEFAULT_CODECS`.

    Attributes:
        codecs (Mapping[str, FieldCodec]): Column name to encoding.

    Examples:
        Lossless coordinates.
        ```python
        CodecConfig().with_overrides(
            xCoordList=(Strategy.FLOAT32, 0),
            yCoordList=(Strategy.FLOAT32, 0),
            zCoordList=(Strategy.FLOAT32, 0),
        )
        ```

    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        validate_by_name=True,
        validate_by_alias=True,
    )

    codecs: Annotated[
        Mapping[str, FieldCodec],
        Field(
            title="codecs",
            description="Column name to encoding.",
        ),
    ] = Field(default_factory=lambda: dict(DEFAULT_CODECS))

    def codec(self: Self, name: str) -> FieldCodec:
        """Return the encoding of column `name`.

        Raises:
            KeyError: If `name` is not a binary column.

        """
        if name in self.codecs:
            return self.codecs[name]
        return DEFAULT_CODECS[name]

    def with_overrides(
        self: Self,
        **overrides: FieldCodec | tuple[int, int],
    ) -> Self:
        """Return a copy with the encoding of some columns replaced.

        Args:
            **overrides (FieldCodec | tuple[int, int]): Column name to
                encoding, either as a `FieldCodec` or a
                `(strategy, parameter)` pair.

        Returns:
            out (Self): Updated configuration.

        Raises:
            ValueError: If a name is not a binary column.

        """
        unknown: set[str] = set(overrides) - set(DEFAULT_CODECS)
        if unknown:
            msg: str = (
                "Invalid codec configuration: unknown column(s) "
                f"({', '.join(sorted(unknown))})."
            )
            raise ValueError(msg)

        codecs: dict[str, FieldCodec] = dict(self.codecs)
        for name, codec in overrides.items():
            codecs[name] = FieldCodec.model_validate(codec)
        return type(self)(codecs=codecs)
