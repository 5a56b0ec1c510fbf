"""
ABI encoding and decoding for contract calls and results

Implements the head/tail layout: static values sit inline in a tuple's head,
dynamic values leave a 32-byte offset in the head and append their data to
the tuple's tail. Offsets are always relative to the start of the enclosing
tuple region; array elements form their own region starting right after the
array's count word.

Usage:
    payload = encode(FunctionCall("findByOwner", args))
    results = decode_hex_response(raw_hex, [ArrayType(COLLECTION_RESULT_TYPE)])
"""
import logging
import re
from typing import List, Sequence

from web3 import Web3

from .abi_types import (
    WORD_SIZE,
    AbiType,
    AbiValue,
    Address,
    AddressType,
    ArrayType,
    DynamicArray,
    FunctionCall,
    StringType,
    Struct,
    TupleType,
    UInt,
    UIntType,
    Utf8String,
)
from .common import hex_to_bytes
from .exceptions import InvalidEncoding, TruncatedData, TypeMismatch

LOG = logging.getLogger(__name__)

SELECTOR_SIZE = 4

_SIGNATURE_RE = re.compile(r"^([A-Za-z_$][A-Za-z0-9_$]*)\((.*)\)$")


def function_selector(signature: str) -> bytes:
    """Compute the 4-byte function selector for a canonical signature

    Args:
        signature: Canonical signature, e.g. "findByOwner(address[],address,uint256)"

    Returns:
        First 4 bytes of keccak256(signature)

    Raises:
        ValueError: Empty name or malformed signature
    """
    if not isinstance(signature, str):
        raise ValueError(f"Signature must be a string, got {type(signature).__name__}")
    if signature.startswith("("):
        raise ValueError(f"Function name cannot be empty: {signature!r}")
    if not _SIGNATURE_RE.match(signature):
        raise ValueError(f"Malformed function signature: {signature!r}")
    return bytes(Web3.keccak(text=signature))[:SELECTOR_SIZE]


# --------------------------------------------------------------------------
# Encoding
# --------------------------------------------------------------------------


def encode(call: FunctionCall) -> bytes:
    """Encode a function call as selector + argument tuple"""
    arguments = encode_arguments(call.arguments)
    payload = function_selector(call.signature) + arguments
    LOG.debug(f"Encoded {call.signature}: {len(payload)} bytes")
    return payload


def encode_arguments(values: Sequence[AbiValue]) -> bytes:
    """Encode values as a top-level tuple (no selector, no count word)"""
    values = tuple(values)
    for value in values:
        if not isinstance(value, AbiValue):
            raise TypeMismatch(
                f"Expected an ABI value, got {type(value).__name__}",
                actual=type(value).__name__,
            )
    return _encode_tuple(values, [value.abi_type for value in values])


def _encode_word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big")


def _pad_right(data: bytes) -> bytes:
    remainder = len(data) % WORD_SIZE
    if remainder:
        data += b"\x00" * (WORD_SIZE - remainder)
    return data


def _encode_tuple(values: Sequence[AbiValue], types: Sequence[AbiType]) -> bytes:
    if len(values) != len(types):
        raise TypeMismatch(
            f"Expected {len(types)} values, got {len(values)}",
            expected=str(len(types)),
            actual=str(len(values)),
        )

    head_length = sum(t.head_size for t in types)
    heads: List[bytes] = []
    tails: List[bytes] = []
    tail_offset = head_length

    for value, abi_type in zip(values, types):
        encoded = _encode_value(value, abi_type)
        if abi_type.is_dynamic:
            # Offset is relative to the start of this tuple's head
            heads.append(_encode_word(tail_offset))
            tails.append(encoded)
            tail_offset += len(encoded)
        else:
            heads.append(encoded)

    return b"".join(heads) + b"".join(tails)


def _mismatch(value: AbiValue, abi_type: AbiType) -> TypeMismatch:
    actual = value.abi_type.canonical if isinstance(value, AbiValue) else type(value).__name__
    return TypeMismatch(
        f"Expected {abi_type.canonical}, got {actual}",
        expected=abi_type.canonical,
        actual=actual,
    )


def _encode_value(value: AbiValue, abi_type: AbiType) -> bytes:
    if isinstance(abi_type, AddressType):
        if not isinstance(value, Address):
            raise _mismatch(value, abi_type)
        return b"\x00" * (WORD_SIZE - len(value.value)) + value.value

    if isinstance(abi_type, UIntType):
        if not isinstance(value, UInt) or value.bits != abi_type.bits:
            raise _mismatch(value, abi_type)
        if isinstance(value.value, bool) or not isinstance(value.value, int):
            raise TypeMismatch(
                f"{abi_type.canonical} value must be an int, got {type(value.value).__name__}",
                expected=abi_type.canonical,
                actual=type(value.value).__name__,
            )
        if value.value < 0 or value.value > abi_type.max_value:
            raise TypeMismatch(
                f"Value {value.value} out of range for {abi_type.canonical}",
                expected=abi_type.canonical,
                actual=str(value.value),
            )
        return _encode_word(value.value)

    if isinstance(abi_type, StringType):
        if not isinstance(value, Utf8String) or not isinstance(value.value, str):
            raise _mismatch(value, abi_type)
        data = value.value.encode("utf-8")
        return _encode_word(len(data)) + _pad_right(data)

    if isinstance(abi_type, ArrayType):
        if (not isinstance(value, DynamicArray)
                or value.element_type.canonical != abi_type.element.canonical):
            raise _mismatch(value, abi_type)
        items = value.items
        # Elements are encoded as a standalone tuple after the count word
        return _encode_word(len(items)) + _encode_tuple(items, [abi_type.element] * len(items))

    if isinstance(abi_type, TupleType):
        if not isinstance(value, Struct) or value.struct_type.canonical != abi_type.canonical:
            raise _mismatch(value, abi_type)
        return _encode_tuple(value.values, abi_type.types)

    raise TypeMismatch(f"Unsupported ABI type: {abi_type!r}")


# --------------------------------------------------------------------------
# Decoding
# --------------------------------------------------------------------------


def decode(data: bytes, shape: AbiType) -> AbiValue:
    """Decode data holding the ABI encoding of a single value"""
    return decode_arguments(data, [shape])[0]


def decode_arguments(data: bytes, shapes: Sequence[AbiType]) -> List[AbiValue]:
    """Decode data as a top-level tuple of the given types"""
    data = bytes(data)
    return _decode_tuple(data, list(shapes), 0)


def decode_hex_response(raw: str, shapes: Sequence[AbiType]) -> List[AbiValue]:
    """Decode a hex-encoded eth_call result

    Args:
        raw: Hex string as returned by the node, usually 0x-prefixed
        shapes: Declared output types of the function

    Returns:
        Decoded output values; empty list if the response carries no data

    Raises:
        InvalidEncoding: Malformed hex or value not representable as its type
        TruncatedData: Response shorter than the declared outputs require
    """
    data = hex_to_bytes(raw or "")
    LOG.debug(f"Raw hex data: {raw}")
    LOG.debug(f"Data length (bytes): {len(data)}")
    if not data:
        return []
    return decode_arguments(data, shapes)


def _read(data: bytes, start: int, size: int) -> bytes:
    end = start + size
    if start < 0 or end > len(data):
        raise TruncatedData(
            f"Need {size} bytes at offset {start}, buffer has {len(data)}",
            offset=start,
            needed=size,
            available=max(len(data) - start, 0),
        )
    return data[start:end]


def _read_uint(data: bytes, start: int) -> int:
    return int.from_bytes(_read(data, start, WORD_SIZE), "big")


def _decode_tuple(data: bytes, types: Sequence[AbiType], base: int) -> List[AbiValue]:
    """Decode a tuple region starting at absolute position base"""
    values = []
    head_pos = base
    for abi_type in types:
        if abi_type.is_dynamic:
            offset = _read_uint(data, head_pos)
            values.append(_decode_value(data, abi_type, base + offset))
        else:
            values.append(_decode_value(data, abi_type, head_pos))
        head_pos += abi_type.head_size
    return values


def _decode_value(data: bytes, abi_type: AbiType, position: int) -> AbiValue:
    if isinstance(abi_type, AddressType):
        word = _read(data, position, WORD_SIZE)
        if any(word[:12]):
            raise InvalidEncoding(
                "Address word has non-zero padding",
                abi_type=abi_type.canonical,
                offset=position,
            )
        return Address(word[12:])

    if isinstance(abi_type, UIntType):
        number = _read_uint(data, position)
        if number > abi_type.max_value:
            raise InvalidEncoding(
                f"Value {number} does not fit in {abi_type.canonical}",
                abi_type=abi_type.canonical,
                offset=position,
            )
        return UInt(number, abi_type.bits)

    if isinstance(abi_type, StringType):
        length = _read_uint(data, position)
        raw = _read(data, position + WORD_SIZE, length)
        try:
            return Utf8String(raw.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise InvalidEncoding(
                f"String is not valid UTF-8: {e}",
                abi_type=abi_type.canonical,
                offset=position,
            )

    if isinstance(abi_type, ArrayType):
        count = _read_uint(data, position)
        region = position + WORD_SIZE
        # Reject counts that cannot fit before allocating anything
        needed = count * abi_type.element.head_size
        if region + needed > len(data):
            raise TruncatedData(
                f"Array of {count} {abi_type.element.canonical} needs {needed} bytes "
                f"at offset {region}, buffer has {len(data)}",
                offset=region,
                needed=needed,
                available=max(len(data) - region, 0),
            )
        items = _decode_tuple(data, [abi_type.element] * count, region)
        return DynamicArray(abi_type.element, tuple(items))

    if isinstance(abi_type, TupleType):
        return Struct(abi_type, tuple(_decode_tuple(data, abi_type.types, position)))

    raise InvalidEncoding(f"Unsupported ABI type: {abi_type!r}")
