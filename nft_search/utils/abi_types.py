"""
ABI type descriptors and values

TypeDescriptors describe the shape of data (no values); AbiValues carry data
together with their declared type. Decoding always takes a descriptor up
front, so nothing is inferred from the bytes themselves.

Usage:
    TOKEN = TupleType((Component("id", UINT256), Component("uri", STRING)))
    value = Struct(TOKEN, (UInt(1), Utf8String("ipfs://a")))
    call = FunctionCall("findByOwner", (tokens_array, owner, UInt(100)))
    call.signature  # 'findByOwner((uint256,string)[],address,uint256)'
"""
from dataclasses import dataclass, field
from typing import Any, Iterable, Tuple, Union

from eth_utils import is_hex_address
from web3 import Web3

from .common import strip_0x

WORD_SIZE = 32


class AbiType:
    """Base class for type descriptors"""

    @property
    def canonical(self) -> str:
        raise NotImplementedError

    @property
    def is_dynamic(self) -> bool:
        raise NotImplementedError

    @property
    def head_size(self) -> int:
        """Bytes this type occupies in its parent's head"""
        return WORD_SIZE

    def __str__(self) -> str:
        return self.canonical


@dataclass(frozen=True)
class AddressType(AbiType):

    @property
    def canonical(self) -> str:
        return "address"

    @property
    def is_dynamic(self) -> bool:
        return False


@dataclass(frozen=True)
class UIntType(AbiType):
    bits: int = 256

    def __post_init__(self):
        if self.bits <= 0 or self.bits > 256 or self.bits % 8:
            raise ValueError(f"Invalid uint width: {self.bits}")

    @property
    def canonical(self) -> str:
        return f"uint{self.bits}"

    @property
    def is_dynamic(self) -> bool:
        return False

    @property
    def max_value(self) -> int:
        return (1 << self.bits) - 1


@dataclass(frozen=True)
class StringType(AbiType):

    @property
    def canonical(self) -> str:
        return "string"

    @property
    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class ArrayType(AbiType):
    """Dynamically sized array T[]"""
    element: AbiType

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[]"

    @property
    def is_dynamic(self) -> bool:
        return True


@dataclass(frozen=True)
class Component:
    """Named field of a tuple type"""
    name: str
    type: AbiType


@dataclass(frozen=True)
class TupleType(AbiType):
    """Struct / tuple type with ordered, named components"""
    components: Tuple[Component, ...]

    def __post_init__(self):
        # Accept any iterable but store a tuple so instances stay hashable
        object.__setattr__(self, "components", tuple(self.components))

    @property
    def canonical(self) -> str:
        return "(" + ",".join(c.type.canonical for c in self.components) + ")"

    @property
    def is_dynamic(self) -> bool:
        return any(c.type.is_dynamic for c in self.components)

    @property
    def head_size(self) -> int:
        if self.is_dynamic:
            return WORD_SIZE
        return sum(c.type.head_size for c in self.components)

    @property
    def types(self) -> Tuple[AbiType, ...]:
        return tuple(c.type for c in self.components)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.components)


ADDRESS = AddressType()
UINT256 = UIntType(256)
STRING = StringType()

# Descriptor accepted wherever a type is expected
TypeDescriptor = Union[AddressType, UIntType, StringType, ArrayType, TupleType]


class AbiValue:
    """Base class for typed ABI values"""

    @property
    def abi_type(self) -> AbiType:
        raise NotImplementedError


@dataclass(frozen=True)
class Address(AbiValue):
    """20-byte account/contract address"""
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)) or len(self.value) != 20:
            raise ValueError(f"Address must be 20 bytes, got {self.value!r}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_hex(cls, address: str) -> "Address":
        if not isinstance(address, str) or not is_hex_address(address):
            raise ValueError(f"Invalid address: {address!r}")
        return cls(bytes.fromhex(strip_0x(address)))

    @property
    def abi_type(self) -> AbiType:
        return ADDRESS

    @property
    def checksum(self) -> str:
        """EIP-55 checksum form"""
        return Web3.to_checksum_address("0x" + self.value.hex())

    def __str__(self) -> str:
        return self.checksum


@dataclass(frozen=True)
class UInt(AbiValue):
    """Unsigned integer of a given bit width (range is checked at encode time)"""
    value: int
    bits: int = 256

    @property
    def abi_type(self) -> AbiType:
        return UIntType(self.bits)


@dataclass(frozen=True)
class Utf8String(AbiValue):
    value: str

    @property
    def abi_type(self) -> AbiType:
        return STRING


@dataclass(frozen=True)
class DynamicArray(AbiValue):
    """Variable-length array whose items all have element_type"""
    element_type: AbiType
    items: Tuple[AbiValue, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    @property
    def abi_type(self) -> AbiType:
        return ArrayType(self.element_type)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


@dataclass(frozen=True)
class Struct(AbiValue):
    """Tuple value; values line up with struct_type.components"""
    struct_type: TupleType
    values: Tuple[AbiValue, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    @property
    def abi_type(self) -> AbiType:
        return self.struct_type

    def __getitem__(self, name: str) -> AbiValue:
        for component, value in zip(self.struct_type.components, self.values):
            if component.name == name:
                return value
        raise KeyError(name)


@dataclass(frozen=True)
class FunctionCall:
    """Function name plus its ordered, typed arguments"""
    name: str
    arguments: Tuple[AbiValue, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @property
    def input_types(self) -> Tuple[AbiType, ...]:
        return tuple(arg.abi_type for arg in self.arguments)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(t.canonical for t in self.input_types)})"


def array_of(element_type: AbiType, items: Iterable[Any]) -> DynamicArray:
    """Build a DynamicArray, wrapping plain Python items where the element type allows"""
    return DynamicArray(element_type, tuple(_wrap(element_type, item) for item in items))


def _wrap(abi_type: AbiType, item: Any) -> AbiValue:
    if isinstance(item, AbiValue):
        return item
    if isinstance(abi_type, AddressType) and isinstance(item, str):
        return Address.from_hex(item)
    if isinstance(abi_type, UIntType) and isinstance(item, int) and not isinstance(item, bool):
        return UInt(item, abi_type.bits)
    if isinstance(abi_type, StringType) and isinstance(item, str):
        return Utf8String(item)
    raise ValueError(f"Cannot wrap {item!r} as {abi_type.canonical}")
