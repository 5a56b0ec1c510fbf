"""
Domain records returned by the search contract

Each record has an explicit TupleType describing its field order and types;
from_abi/to_abi convert between records and decoded ABI structs.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..utils.abi_types import (
    ADDRESS,
    STRING,
    UINT256,
    AbiValue,
    Address,
    ArrayType,
    Component,
    DynamicArray,
    Struct,
    TupleType,
    UInt,
    Utf8String,
)
from ..utils.exceptions import TypeMismatch

# struct TokenInfo { uint256 id; string tokenUri; }
TOKEN_RECORD_TYPE = TupleType((
    Component("id", UINT256),
    Component("tokenUri", STRING),
))

# struct Result { address collection; string name; TokenInfo[] tokens; }
COLLECTION_RESULT_TYPE = TupleType((
    Component("collection", ADDRESS),
    Component("name", STRING),
    Component("tokens", ArrayType(TOKEN_RECORD_TYPE)),
))

FIND_BY_OWNER_OUTPUTS = (ArrayType(COLLECTION_RESULT_TYPE),)


def _expect_struct(value: Any, struct_type: TupleType) -> Struct:
    if not isinstance(value, Struct) or value.struct_type.canonical != struct_type.canonical:
        actual = value.abi_type.canonical if isinstance(value, AbiValue) else type(value).__name__
        raise TypeMismatch(
            f"Expected struct {struct_type.canonical}, got {actual}",
            expected=struct_type.canonical,
            actual=actual,
        )
    return value


@dataclass
class TokenRecord:
    """A token owned in a collection"""
    id: int
    uri: str

    @classmethod
    def from_abi(cls, value: Struct) -> "TokenRecord":
        token_id, uri = _expect_struct(value, TOKEN_RECORD_TYPE).values
        return cls(id=token_id.value, uri=uri.value)

    def to_abi(self) -> Struct:
        return Struct(TOKEN_RECORD_TYPE, (UInt(self.id), Utf8String(self.uri)))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "uri": self.uri}


@dataclass
class CollectionResult:
    """Tokens an owner holds in one ERC-721 collection"""
    collection_address: str
    name: str
    tokens: List[TokenRecord] = field(default_factory=list)

    @classmethod
    def from_abi(cls, value: Struct) -> "CollectionResult":
        collection, name, tokens = _expect_struct(value, COLLECTION_RESULT_TYPE).values
        return cls(
            collection_address=collection.checksum,
            name=name.value,
            tokens=[TokenRecord.from_abi(token) for token in tokens.items],
        )

    def to_abi(self) -> Struct:
        return Struct(COLLECTION_RESULT_TYPE, (
            Address.from_hex(self.collection_address),
            Utf8String(self.name),
            DynamicArray(TOKEN_RECORD_TYPE, tuple(token.to_abi() for token in self.tokens)),
        ))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collection": self.collection_address,
            "name": self.name,
            "tokens": [token.to_dict() for token in self.tokens],
        }


def collection_results_from_abi(value: DynamicArray) -> List[CollectionResult]:
    """Convert a decoded Result[] into records"""
    if not isinstance(value, DynamicArray) or value.element_type.canonical != COLLECTION_RESULT_TYPE.canonical:
        actual = value.abi_type.canonical if isinstance(value, AbiValue) else type(value).__name__
        raise TypeMismatch(
            f"Expected {COLLECTION_RESULT_TYPE.canonical}[], got {actual}",
            expected=f"{COLLECTION_RESULT_TYPE.canonical}[]",
            actual=actual,
        )
    return [CollectionResult.from_abi(item) for item in value.items]
