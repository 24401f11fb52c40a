"""Typed-array binary codec.

This submodule defines the strategies used to pack structural columns
(coordinates, serial numbers, bond tables, sequence indexes, secondary
structure codes, identifiers) into compact big-endian byte buffers, and the
inverse transforms that unpack them into typed columns.

Every function is pure: decoding the same bytes twice yields identical
columns, and columns of one structure may be decoded in parallel.

Exports:
    Column: Decoded column type (`numpy.ndarray` or `list[str]`).
    Strategy: Enum of supported encoding strategy codes.
    decode: Decode a raw payload for a given strategy and element count.
    encode: Encode a column into a raw payload for a given strategy.
    decode_array: Decode a self-describing binary array (header + payload).
    encode_array: Encode a column into a self-describing binary array.
    run_length_decode, run_length_encode: Run-length transforms.
    delta_decode, delta_encode: Delta transforms.
    recursive_index_decode, recursive_index_encode: Recursive indexing
        transforms.
    integer_decode, integer_encode: Integer scaling transforms.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np

from .errors import CodecError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__: list[str] = [
    "HEADER_SIZE",
    "Column",
    "Strategy",
    "decode",
    "decode_array",
    "delta_decode",
    "delta_encode",
    "encode",
    "encode_array",
    "integer_decode",
    "integer_encode",
    "recursive_index_decode",
    "recursive_index_encode",
    "run_length_decode",
    "run_length_encode",
]

logger = logging.getLogger(__name__)

Column: TypeAlias = "np.ndarray | list[str]"

HEADER_SIZE: int = 12


class Strategy(IntEnum):
    """Binary column encoding strategy.

    Members:
        FLOAT32: 32-bit floating-point values copied verbatim.
        INT8: 8-bit integers copied verbatim.
        INT16: 16-bit integers copied verbatim.
        INT32: 32-bit integers copied verbatim.
        STRING: Fixed-width, NUL-padded strings (`parameter` bytes each).
        RUN_LENGTH_CHAR: Run-length encoded character codes.
        RUN_LENGTH_INT32: Run-length encoded 32-bit integers.
        DELTA_RUN_LENGTH_INT32: Delta then run-length encoded 32-bit integers.
        INTEGER_RUN_LENGTH: Scaled floats, run-length encoded.
        INTEGER_DELTA_RECURSIVE: Scaled floats, delta then recursive-index
            encoded into 16-bit chunks.
        INTEGER_INT16: Scaled floats stored as 16-bit integers.
        INTEGER_RECURSIVE_INT16: Scaled floats, recursive-index encoded into
            16-bit chunks.
        INTEGER_RECURSIVE_INT8: Scaled floats, recursive-index encoded into
            8-bit chunks.
        RECURSIVE_INT16: Integers recursive-index encoded into 16-bit chunks.
        RECURSIVE_INT8: Integers recursive-index encoded into 8-bit chunks.
        RUN_LENGTH_INT8: Run-length encoded 8-bit integers.

    """

    FLOAT32 = 1
    INT8 = 2
    INT16 = 3
    INT32 = 4
    STRING = 5
    RUN_LENGTH_CHAR = 6
    RUN_LENGTH_INT32 = 7
    DELTA_RUN_LENGTH_INT32 = 8
    INTEGER_RUN_LENGTH = 9
    INTEGER_DELTA_RECURSIVE = 10
    INTEGER_INT16 = 11
    INTEGER_RECURSIVE_INT16 = 12
    INTEGER_RECURSIVE_INT8 = 13
    RECURSIVE_INT16 = 14
    RECURSIVE_INT8 = 15
    RUN_LENGTH_INT8 = 16


_PASS_THROUGH: dict[Strategy, tuple[str, type[np.generic]]] = {
    Strategy.FLOAT32: (">f4", np.float32),
    Strategy.INT8: (">i1", np.int8),
    Strategy.INT16: (">i2", np.int16),
    Strategy.INT32: (">i4", np.int32),
}

_SCALED: frozenset[Strategy] = frozenset(
    {
        Strategy.INTEGER_RUN_LENGTH,
        Strategy.INTEGER_DELTA_RECURSIVE,
        Strategy.INTEGER_INT16,
        Strategy.INTEGER_RECURSIVE_INT16,
        Strategy.INTEGER_RECURSIVE_INT8,
    },
)


def run_length_decode(
    values: np.ndarray,
    length: int | None = None,
) -> np.ndarray:
    """Expand `(value, count)` pairs into runs of identical values.

    Args:
        values (np.ndarray): Flat sequence of `value, count` pairs.
        length (int | None): Expected number of expanded values. Checked
            before expansion when provided.

    Returns:
        out (np.ndarray): Expanded values.

    Raises:
        CodecError: If `values` does not hold whole pairs, a count is
            negative, or the expanded length differs from `length`.

    """
    values = np.asarray(values, dtype=np.int64)
    if values.size % 2:
        msg: str = (
            "Invalid run-length column: expected `value, count` pairs "
            f"(n={values.size})."
        )
        raise CodecError(msg)

    pairs: np.ndarray = values.reshape(-1, 2)
    counts: np.ndarray = pairs[:, 1]
    if (counts < 0).any():
        msg: str = "Invalid run-length column: negative run count."
        raise CodecError(msg)

    if length is not None and int(counts.sum()) != length:
        msg: str = (
            "Invalid run-length column: runs do not add up to the declared "
            f"length (runs={int(counts.sum())}, length={length})."
        )
        raise CodecError(msg)

    return np.repeat(pairs[:, 0], counts)


def run_length_encode(values: Sequence[int] | np.ndarray) -> np.ndarray:
    """Collapse runs of identical values into `(value, count)` pairs.

    Args:
        values (Sequence[int] | np.ndarray): Values to encode.

    Returns:
        out (np.ndarray): Flat sequence of `value, count` pairs.

    """
    values = np.asarray(values, dtype=np.int64)
    if values.size == 0:
        return np.empty(0, dtype=np.int64)

    starts: np.ndarray = np.flatnonzero(
        np.concatenate(([True], values[1:] != values[:-1])),
    )
    counts: np.ndarray = np.diff(np.append(starts, values.size))
    return np.column_stack((values[starts], counts)).ravel()


def delta_decode(values: Sequence[int] | np.ndarray) -> np.ndarray:
    """Reconstruct absolute values from successive differences."""
    return np.cumsum(np.asarray(values, dtype=np.int64), dtype=np.int64)


def delta_encode(values: Sequence[int] | np.ndarray) -> np.ndarray:
    """Replace each value by its difference from the previous one."""
    values = np.asarray(values, dtype=np.int64)
    out: np.ndarray = values.copy()
    out[1:] = np.diff(values)
    return out


def recursive_index_decode(
    values: Sequence[int] | np.ndarray,
    dtype: type[np.integer] = np.int16,
) -> np.ndarray:
    """Sum spilled chunks back into the values they were split from.

    A chunk equal to the maximum (or minimum) of `dtype` carries over into
    the next chunk; the first non-saturated chunk closes the value.

    Args:
        values (Sequence[int] | np.ndarray): Chunks.
        dtype (type[np.integer]): Chunk storage type.

    Returns:
        out (np.ndarray): Reconstructed values.

    Raises:
        CodecError: If the last value is not closed by a non-saturated chunk.

    """
    info: np.iinfo = np.iinfo(dtype)
    values = np.asarray(values, dtype=np.int64)
    ends: np.ndarray = np.flatnonzero(
        (values != info.max) & (values != info.min),
    )

    if values.size and (ends.size == 0 or ends[-1] != values.size - 1):
        msg: str = (
            "Invalid recursive-index column: trailing chunk carries into a "
            "missing value."
        )
        raise CodecError(msg)

    totals: np.ndarray = np.cumsum(values)
    out: np.ndarray = totals[ends].copy()
    out[1:] -= totals[ends[:-1]]
    return out


def recursive_index_encode(
    values: Sequence[int] | np.ndarray,
    dtype: type[np.integer] = np.int16,
) -> np.ndarray:
    """Split values that overflow `dtype` into saturated chunks.

    Args:
        values (Sequence[int] | np.ndarray): Values to encode.
        dtype (type[np.integer]): Chunk storage type.

    Returns:
        out (np.ndarray): Chunks, each representable in `dtype`.

    """
    info: np.iinfo = np.iinfo(dtype)
    out: list[int] = []

    for value in np.asarray(values, dtype=np.int64).tolist():
        if value >= 0:
            while value >= info.max:
                out.append(info.max)
                value -= info.max
        else:
            while value <= info.min:
                out.append(info.min)
                value -= info.min
        out.append(value)

    return np.asarray(out, dtype=np.int64)


def integer_decode(
    values: Sequence[int] | np.ndarray,
    divisor: int,
) -> np.ndarray:
    """Divide scaled integers by `divisor` into single-precision floats."""
    return np.asarray(values).astype(np.float32) / np.float32(divisor)


def integer_encode(
    values: Sequence[float] | np.ndarray,
    divisor: int,
) -> np.ndarray:
    """Scale floats by `divisor` and round them to the nearest integer."""
    return np.rint(np.asarray(values, dtype=np.float64) * divisor).astype(
        np.int64,
    )


def _read(data: bytes, dtype: str) -> np.ndarray:
    size: int = np.dtype(dtype).itemsize
    if len(data) % size:
        msg: str = (
            "Invalid binary column: byte length is not a whole number of "
            f"items (bytes={len(data)}, itemsize={size})."
        )
        raise CodecError(msg)
    return np.frombuffer(data, dtype=dtype).astype(np.int64)


def _check_range(values: np.ndarray, dtype: type[np.integer]) -> None:
    info: np.iinfo = np.iinfo(dtype)
    if values.size and (values.min() < info.min or values.max() > info.max):
        msg: str = (
            "Invalid column value: out of range for storage type "
            f"(dtype={np.dtype(dtype).name}, min={int(values.min())}, "
            f"max={int(values.max())})."
        )
        raise CodecError(msg)


def _narrow(values: np.ndarray, dtype: type[np.integer]) -> np.ndarray:
    _check_range(values, dtype)
    return values.astype(dtype)


def _pack(values: np.ndarray, dtype: type[np.integer]) -> bytes:
    values = np.asarray(values, dtype=np.int64)
    _check_range(values, dtype)
    return values.astype(np.dtype(dtype).newbyteorder(">")).tobytes()


def _check_parameter(strategy: Strategy, parameter: int) -> None:
    if parameter <= 0:
        msg: str = (
            f"Invalid {strategy.name} column: parameter must be positive "
            f"(parameter={parameter})."
        )
        raise CodecError(msg)


def _strategy(code: int) -> Strategy:
    try:
        return Strategy(code)
    except ValueError as e:
        msg: str = f"Unknown column encoding strategy (strategy={code})."
        raise CodecError(msg) from e


def decode(  # noqa: C901
    data: bytes,
    strategy: int,
    length: int,
    parameter: int = 0,
) -> Column:
    """Decode a raw binary payload into a typed column.

    Args:
        data (bytes): Raw payload (without the array header).
        strategy (int): Encoding strategy code.
        length (int): Declared number of elements.
        parameter (int): Strategy parameter: the divisor for integer scaling
            strategies and the string width for `Strategy.STRING`.

    Returns:
        out (Column): Decoded column. Numeric columns are arrays in native
            byte order; string and character columns are lists of `str`.

    Raises:
        CodecError: If `strategy` is unknown, `parameter` is invalid for the
            strategy, or `data` is inconsistent with `length`.

    """
    code: Strategy = _strategy(strategy)
    data = bytes(data)

    if length < 0:
        msg: str = f"Invalid binary column: negative length (length={length})."
        raise CodecError(msg)

    if code in _SCALED or code is Strategy.STRING:
        _check_parameter(code, parameter)

    out: Column
    match code:
        case Strategy.FLOAT32 | Strategy.INT8 | Strategy.INT16 | Strategy.INT32:
            wire, native = _PASS_THROUGH[code]
            if len(data) != length * np.dtype(wire).itemsize:
                msg: str = (
                    f"Invalid {code.name} column: byte length does not match "
                    f"declared length (bytes={len(data)}, length={length})."
                )
                raise CodecError(msg)
            out = np.frombuffer(data, dtype=wire).astype(native)
        case Strategy.STRING:
            if len(data) != length * parameter:
                msg: str = (
                    "Invalid STRING column: byte length does not match "
                    f"declared length (bytes={len(data)}, length={length}, "
                    f"width={parameter})."
                )
                raise CodecError(msg)
            try:
                out = [
                    data[i : i + parameter].rstrip(b"\x00").decode("ascii")
                    for i in range(0, len(data), parameter)
                ]
            except UnicodeDecodeError as e:
                msg: str = "Invalid STRING column: non-ASCII content."
                raise CodecError(msg) from e
        case Strategy.RUN_LENGTH_CHAR:
            codes: np.ndarray = run_length_decode(_read(data, ">i4"), length)
            try:
                out = [chr(c) if c else "" for c in codes.tolist()]
            except (ValueError, OverflowError) as e:
                msg: str = "Invalid RUN_LENGTH_CHAR column: bad char code."
                raise CodecError(msg) from e
        case Strategy.RUN_LENGTH_INT32:
            out = _narrow(
                run_length_decode(_read(data, ">i4"), length),
                np.int32,
            )
        case Strategy.DELTA_RUN_LENGTH_INT32:
            out = _narrow(
                delta_decode(run_length_decode(_read(data, ">i4"), length)),
                np.int32,
            )
        case Strategy.INTEGER_RUN_LENGTH:
            out = integer_decode(
                run_length_decode(_read(data, ">i4"), length),
                parameter,
            )
        case Strategy.INTEGER_DELTA_RECURSIVE:
            out = integer_decode(
                delta_decode(recursive_index_decode(_read(data, ">i2"))),
                parameter,
            )
        case Strategy.INTEGER_INT16:
            out = integer_decode(_read(data, ">i2"), parameter)
        case Strategy.INTEGER_RECURSIVE_INT16:
            out = integer_decode(
                recursive_index_decode(_read(data, ">i2"), np.int16),
                parameter,
            )
        case Strategy.INTEGER_RECURSIVE_INT8:
            out = integer_decode(
                recursive_index_decode(_read(data, ">i1"), np.int8),
                parameter,
            )
        case Strategy.RECURSIVE_INT16:
            out = _narrow(
                recursive_index_decode(_read(data, ">i2"), np.int16),
                np.int32,
            )
        case Strategy.RECURSIVE_INT8:
            out = _narrow(
                recursive_index_decode(_read(data, ">i1"), np.int8),
                np.int32,
            )
        case Strategy.RUN_LENGTH_INT8:
            out = _narrow(
                run_length_decode(_read(data, ">i4"), length),
                np.int8,
            )

    if len(out) != length:
        msg: str = (
            f"Invalid {code.name} column: decoded length does not match "
            f"declared length (decoded={len(out)}, length={length})."
        )
        raise CodecError(msg)

    return out


def _chars(values: Sequence[str]) -> list[int]:
    out: list[int] = []
    for value in values:
        if len(value) > 1:
            msg: str = (
                "Invalid RUN_LENGTH_CHAR value: expected at most one "
                f"character ({value!r})."
            )
            raise CodecError(msg)
        out.append(ord(value) if value else 0)
    return out


def _strings(values: Sequence[str], width: int) -> bytes:
    out: list[bytes] = []
    for value in values:
        try:
            raw: bytes = value.encode("ascii")
        except UnicodeEncodeError as e:
            msg: str = f"Invalid STRING value: non-ASCII content ({value!r})."
            raise CodecError(msg) from e
        if len(raw) > width:
            msg: str = (
                "Invalid STRING value: longer than column width "
                f"(value={value!r}, width={width})."
            )
            raise CodecError(msg)
        out.append(raw.ljust(width, b"\x00"))
    return b"".join(out)


def encode(  # noqa: C901, PLR0911
    values: Sequence[Any] | np.ndarray,
    strategy: int,
    parameter: int = 0,
) -> bytes:
    """Encode a typed column into a raw binary payload.

    Args:
        values (Sequence[Any] | np.ndarray): Column values. Strings for
            `Strategy.STRING`, single characters (or `""`) for
            `Strategy.RUN_LENGTH_CHAR`, numbers otherwise.
        strategy (int): Encoding strategy code.
        parameter (int): Strategy parameter: the divisor for integer scaling
            strategies and the string width for `Strategy.STRING`.

    Returns:
        out (bytes): Raw payload (without the array header).

    Raises:
        CodecError: If `strategy` is unknown, `parameter` is invalid, or a
            value does not fit the strategy's storage type.

    """
    code: Strategy = _strategy(strategy)

    if code in _SCALED or code is Strategy.STRING:
        _check_parameter(code, parameter)

    match code:
        case Strategy.FLOAT32:
            return np.asarray(values, dtype=np.float64).astype(">f4").tobytes()
        case Strategy.INT8 | Strategy.INT16 | Strategy.INT32:
            _, native = _PASS_THROUGH[code]
            return _pack(np.asarray(values, dtype=np.int64), native)
        case Strategy.STRING:
            return _strings(values, parameter)
        case Strategy.RUN_LENGTH_CHAR:
            return _pack(run_length_encode(_chars(values)), np.int32)
        case Strategy.RUN_LENGTH_INT32:
            return _pack(run_length_encode(values), np.int32)
        case Strategy.DELTA_RUN_LENGTH_INT32:
            return _pack(run_length_encode(delta_encode(values)), np.int32)
        case Strategy.INTEGER_RUN_LENGTH:
            return _pack(
                run_length_encode(integer_encode(values, parameter)),
                np.int32,
            )
        case Strategy.INTEGER_DELTA_RECURSIVE:
            return _pack(
                recursive_index_encode(
                    delta_encode(integer_encode(values, parameter)),
                    np.int16,
                ),
                np.int16,
            )
        case Strategy.INTEGER_INT16:
            return _pack(integer_encode(values, parameter), np.int16)
        case Strategy.INTEGER_RECURSIVE_INT16:
            return _pack(
                recursive_index_encode(
                    integer_encode(values, parameter),
                    np.int16,
                ),
                np.int16,
            )
        case Strategy.INTEGER_RECURSIVE_INT8:
            return _pack(
                recursive_index_encode(
                    integer_encode(values, parameter),
                    np.int8,
                ),
                np.int8,
            )
        case Strategy.RECURSIVE_INT16:
            return _pack(recursive_index_encode(values, np.int16), np.int16)
        case Strategy.RECURSIVE_INT8:
            return _pack(recursive_index_encode(values, np.int8), np.int8)
        case Strategy.RUN_LENGTH_INT8:
            ints: np.ndarray = np.asarray(values, dtype=np.int64)
            _pack(ints, np.int8)  # range check
            return _pack(run_length_encode(ints), np.int32)


def decode_array(buffer: bytes) -> Column:
    """Decode a self-describing binary array.

    The array starts with a 12-byte big-endian header holding the strategy
    code, the element count, and the strategy parameter, followed by the
    payload.

    Args:
        buffer (bytes): Header and payload.

    Returns:
        out (Column): Decoded column.

    Raises:
        CodecError: If the header is truncated or the payload is malformed.

    """
    buffer = bytes(buffer)
    if len(buffer) < HEADER_SIZE:
        msg: str = (
            "Invalid binary array: truncated header "
            f"(bytes={len(buffer)}, expected>={HEADER_SIZE})."
        )
        raise CodecError(msg)

    strategy, length, parameter = (
        int(value)
        for value in np.frombuffer(buffer[:HEADER_SIZE], dtype=">i4")
    )
    logger.debug(
        "Decoding binary array (strategy=%d, length=%d, parameter=%d).",
        strategy,
        length,
        parameter,
    )
    return decode(buffer[HEADER_SIZE:], strategy, length, parameter)


def encode_array(
    values: Sequence[Any] | np.ndarray,
    strategy: int,
    parameter: int = 0,
) -> bytes:
    """Encode a column into a self-describing binary array.

    Args:
        values (Sequence[Any] | np.ndarray): Column values.
        strategy (int): Encoding strategy code.
        parameter (int): Strategy parameter.

    Returns:
        out (bytes): 12-byte header followed by the payload.

    Raises:
        CodecError: If the column cannot be encoded with `strategy`.

    """
    payload: bytes = encode(values, strategy, parameter)
    header: bytes = np.asarray(
        [int(strategy), len(values), parameter],
        dtype=">i4",
    ).tobytes()
    logger.debug(
        "Encoded binary array (strategy=%d, length=%d, bytes=%d).",
        int(strategy),
        len(values),
        len(payload),
    )
    return header + payload
