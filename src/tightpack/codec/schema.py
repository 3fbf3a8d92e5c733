"""Schema introspection for Python type annotations.

This module maps type annotations (including pydantic models) onto wire
shapes. Each shape is a TypeSpec that drives a Writer for encoding and a
Reader for decoding, so every annotated type gets Encodable/Decodable
behaviour without reflection in the engines themselves.
"""

from __future__ import annotations

import enum
import functools
import types
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Callable,
    Iterable,
    List,
    Mapping,
    Tuple,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from ..exceptions import CustomError, DecodeError, EncodeError, InvalidValueError, SchemaError
from .protocol import is_decodable, is_encodable
from .reader import Reader, SeqAccess
from .writer import Compound, Writer

NoneType = type(None)


class Primitive(enum.Enum):
    """Wire primitives, used as ``Annotated`` metadata to pick a width."""

    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    F32 = "f32"
    F64 = "f64"
    CHAR = "char"
    STR = "str"
    BYTES = "bytes"
    UNIT = "unit"


@dataclass(frozen=True, init=False)
class VariantTable:
    """Explicit index -> variant table for a tagged union.

    The position of each type is its variant index on the wire. A variant may
    be a pydantic model (struct payload), ``None`` (unit payload) or any other
    supported type (single-field payload).

    Example:
        >>> Shape = Annotated[Union[Circle, Square], VariantTable(Circle, Square)]
    """

    variants: Tuple[Any, ...]

    def __init__(self, *variants: Any) -> None:
        if not variants:
            raise SchemaError("VariantTable needs at least one variant")
        object.__setattr__(self, "variants", tuple(NoneType if v is None else v for v in variants))


@dataclass(frozen=True)
class BoundValue:
    """A value paired with the spec that knows how to encode it."""

    spec: TypeSpec
    value: Any

    def tightpack_encode(self, writer: Writer) -> None:
        self.spec.write(writer, self.value)


class TypeSpec:
    """Wire shape of a type: how to write a value and how to read one back."""

    def write(self, writer: Writer, value: Any) -> None:
        raise NotImplementedError

    def read(self, reader: Reader) -> Any:
        raise NotImplementedError

    def bind(self, value: Any) -> BoundValue:
        return BoundValue(self, value)

    def describe(self) -> str:
        return type(self).__name__


class PrimitiveSpec(TypeSpec):
    def __init__(self, kind: Primitive) -> None:
        self.kind = kind
        self._emit = getattr(Writer, f"emit_{kind.value}")
        self._read = getattr(Reader, f"read_{kind.value}")

    def write(self, writer: Writer, value: Any) -> None:
        if self.kind is Primitive.UNIT:
            writer.emit_unit()
            return
        self._emit(writer, value)

    def read(self, reader: Reader) -> Any:
        return self._read(reader)

    def describe(self) -> str:
        return self.kind.value


class OptionSpec(TypeSpec):
    def __init__(self, inner: TypeSpec) -> None:
        self.inner = inner

    def write(self, writer: Writer, value: Any) -> None:
        if value is None:
            writer.emit_option_none()
        else:
            writer.emit_option_some(self.inner.bind(value))

    def read(self, reader: Reader) -> Any:
        if reader.read_option():
            return self.inner.read(reader)
        return None

    def describe(self) -> str:
        return f"Option[{self.inner.describe()}]"


class SeqSpec(TypeSpec):
    """Length-prefixed sequence; ``container`` builds the decoded value."""

    def __init__(self, element: TypeSpec, container: Callable[[Iterable[Any]], Any]) -> None:
        self.element = element
        self.container = container

    def write(self, writer: Writer, value: Any) -> None:
        try:
            items = iter(value)
        except TypeError as e:
            raise EncodeError(
                f"{self.describe()}: expected an iterable, got {type(value).__name__}"
            ) from e
        length = len(value) if hasattr(value, "__len__") else None
        with writer.begin_seq(length) as seq:
            for item in items:
                seq.element(self.element.bind(item))

    def read(self, reader: Reader) -> Any:
        return self.container(reader.read_seq().elements(self.element.read))

    def describe(self) -> str:
        return f"{getattr(self.container, '__name__', 'seq')}[{self.element.describe()}]"


class MapSpec(TypeSpec):
    def __init__(self, key: TypeSpec, value: TypeSpec) -> None:
        self.key = key
        self.value = value

    def write(self, writer: Writer, value: Any) -> None:
        if not isinstance(value, Mapping):
            raise EncodeError(f"{self.describe()}: expected a mapping, got {type(value).__name__}")
        with writer.begin_map(len(value)) as entries:
            for k, v in value.items():
                entries.entry(self.key.bind(k), self.value.bind(v))

    def read(self, reader: Reader) -> Any:
        return dict(reader.read_map().entries(self.key.read, self.value.read))

    def describe(self) -> str:
        return f"dict[{self.key.describe()}, {self.value.describe()}]"


class TupleSpec(TypeSpec):
    """Fixed-arity tuple: no length on the wire."""

    def __init__(self, items: List[TypeSpec]) -> None:
        self.items = items

    def write(self, writer: Writer, value: Any) -> None:
        try:
            values = tuple(value)
        except TypeError as e:
            raise EncodeError(
                f"{self.describe()}: expected a tuple, got {type(value).__name__}"
            ) from e
        if len(values) != len(self.items):
            raise EncodeError(f"tuple: expected {len(self.items)} items, got {len(values)}")
        with writer.begin_tuple(len(self.items)) as tup:
            for spec, item in zip(self.items, values):
                tup.element(spec.bind(item))

    def read(self, reader: Reader) -> Any:
        access = reader.read_tuple(len(self.items))
        return tuple(access.next_element(spec.read) for spec in self.items)

    def describe(self) -> str:
        return f"tuple[{', '.join(spec.describe() for spec in self.items)}]"


class StructSpec(TypeSpec):
    """Pydantic model laid out as its fields in declaration order.

    Fields are resolved on first use so that recursive models work.
    """

    def __init__(self, model: type[BaseModel]) -> None:
        self.model = model
        self._fields: List[Tuple[str, TypeSpec]] | None = None

    @property
    def fields(self) -> List[Tuple[str, TypeSpec]]:
        if self._fields is None:
            self._fields = [
                (name, resolve_type(info.annotation, info.metadata))
                for name, info in self.model.model_fields.items()
            ]
        return self._fields

    def write_fields(self, compound: Compound, value: Any) -> None:
        for name, spec in self.fields:
            try:
                compound.element(spec.bind(getattr(value, name)))
            except EncodeError as e:
                raise type(e)(f"{self.model.__name__}.{name}: {e}") from e

    def read_fields(self, access: SeqAccess) -> Any:
        model_fields = self.model.model_fields
        values: dict[str, Any] = {}
        for name, spec in self.fields:
            key = _init_key(name, model_fields[name])
            try:
                values[key] = access.next_element(spec.read)
            except DecodeError as e:
                raise type(e)(f"{self.model.__name__}.{name}: {e}") from e

        try:
            return self.model(**values)
        except ValidationError as e:
            raise CustomError.custom(f"Failed to construct {self.model.__name__}: {e}") from e

    def write(self, writer: Writer, value: Any) -> None:
        if not isinstance(value, self.model):
            raise EncodeError(
                f"{self.model.__name__}: expected {self.model.__name__}, got {type(value).__name__}"
            )
        with writer.begin_struct(len(self.fields)) as struct:
            self.write_fields(struct, value)

    def read(self, reader: Reader) -> Any:
        return self.read_fields(reader.read_struct(len(self.fields)))

    def describe(self) -> str:
        return self.model.__name__


class EnumSpec(TypeSpec):
    """Python enum as a tagged union of unit variants, indexed by declaration order."""

    def __init__(self, enum_type: type[enum.Enum]) -> None:
        self.enum_type = enum_type
        self.members = list(enum_type)
        if not self.members:
            raise SchemaError(f"Enum {enum_type.__name__} has no values")

    def write(self, writer: Writer, value: Any) -> None:
        if not isinstance(value, self.enum_type):
            raise EncodeError(
                f"{self.enum_type.__name__}: expected {self.enum_type.__name__}, "
                f"got {type(value).__name__}"
            )
        writer.begin_variant(self.members.index(value)).end()

    def read(self, reader: Reader) -> Any:
        index = reader.read_variant()
        if index >= len(self.members):
            raise _unknown_variant(self.enum_type.__name__, index, len(self.members))
        reader.read_tuple(0)
        return self.members[index]

    def describe(self) -> str:
        return self.enum_type.__name__


def _unknown_variant(name: str, index: int, count: int) -> InvalidValueError:
    return InvalidValueError(f"{name}: unknown variant index {index} (only {count} variants)")


@dataclass
class _Variant:
    tp: Any
    match: type
    payload: TypeSpec | None

    @property
    def arity(self) -> int:
        if isinstance(self.payload, StructSpec):
            return len(self.payload.fields)
        return 0 if self.payload is None else 1


class UnionSpec(TypeSpec):
    """Tagged union driven by an explicit VariantTable."""

    def __init__(self, table: VariantTable) -> None:
        self.table = table
        self._variants: List[_Variant] | None = None

    @property
    def variants(self) -> List[_Variant]:
        if self._variants is None:
            self._variants = [self._make_variant(tp) for tp in self.table.variants]
        return self._variants

    @staticmethod
    def _make_variant(tp: Any) -> _Variant:
        if tp is NoneType:
            return _Variant(tp, NoneType, None)
        if isinstance(tp, type) and issubclass(tp, BaseModel):
            return _Variant(tp, tp, struct_spec(tp))
        return _Variant(tp, _runtime_type(tp), resolve_type(tp))

    def _index_of(self, value: Any) -> int:
        for index, variant in enumerate(self.variants):
            if type(value) is variant.match:
                return index
        for index, variant in enumerate(self.variants):
            if isinstance(value, variant.match):
                return index
        raise EncodeError(f"{self.describe()}: {type(value).__name__} is not a variant")

    def write(self, writer: Writer, value: Any) -> None:
        index = self._index_of(value)
        variant = self.variants[index]
        with writer.begin_variant(index, variant.arity) as payload:
            if isinstance(variant.payload, StructSpec):
                variant.payload.write_fields(payload, value)
            elif variant.payload is not None:
                payload.element(variant.payload.bind(value))

    def read(self, reader: Reader) -> Any:
        index = reader.read_variant()
        if index >= len(self.variants):
            raise _unknown_variant(self.describe(), index, len(self.variants))

        variant = self.variants[index]
        access = reader.read_tuple(variant.arity)
        if isinstance(variant.payload, StructSpec):
            return variant.payload.read_fields(access)
        if variant.payload is not None:
            return access.next_element(variant.payload.read)
        return None

    def describe(self) -> str:
        return "Union[" + ", ".join(_type_name(tp) for tp in self.table.variants) + "]"


class CustomSpec(TypeSpec):
    """Delegates to a type's own ``tightpack_encode`` / ``tightpack_decode``."""

    def __init__(self, tp: type) -> None:
        self.tp = tp

    def write(self, writer: Writer, value: Any) -> None:
        if not isinstance(value, self.tp):
            raise EncodeError(
                f"{self.tp.__name__}: expected {self.tp.__name__}, got {type(value).__name__}"
            )
        value.tightpack_encode(writer)

    def read(self, reader: Reader) -> Any:
        try:
            return self.tp.tightpack_decode(reader)
        except ValueError as e:
            raise CustomError.custom(f"{self.tp.__name__}: {e}") from e

    def describe(self) -> str:
        return self.tp.__name__


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", repr(tp))


def _init_key(name: str, info: FieldInfo) -> str:
    """Keyword under which the model constructor accepts field ``name``."""
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _runtime_type(tp: Any) -> type:
    """Class used to match a value against a non-model variant."""
    origin = get_origin(tp)
    if origin is Annotated:
        return _runtime_type(get_args(tp)[0])
    if origin is not None:
        return origin
    if isinstance(tp, type):
        return tp
    raise SchemaError(f"Unsupported variant type {tp!r}")


_PLAIN_TYPES = {
    bool: Primitive.BOOL,
    float: Primitive.F64,
    str: Primitive.STR,
    bytes: Primitive.BYTES,
    NoneType: Primitive.UNIT,
}

_SEQUENCE_ORIGINS = {list: list, set: set, frozenset: frozenset}

_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)


@functools.lru_cache(maxsize=None)
def struct_spec(model: type[BaseModel]) -> StructSpec:
    """Return the (cached) struct spec for a pydantic model class."""
    return StructSpec(model)


def resolve_type(tp: Any, metadata: Iterable[Any] = ()) -> TypeSpec:
    """Map a type annotation onto its wire shape.

    Args:
        tp: Type annotation
        metadata: Extra ``Annotated`` metadata (pydantic keeps field-level
            metadata apart from the annotation)

    Returns:
        TypeSpec for the annotation

    Raises:
        SchemaError: If the annotation cannot be mapped onto the wire format
    """
    for marker in metadata:
        if isinstance(marker, Primitive):
            return PrimitiveSpec(marker)
        if isinstance(marker, VariantTable):
            return UnionSpec(marker)

    if tp is None:
        tp = NoneType

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        return resolve_type(args[0], args[1:])

    if origin in _UNION_ORIGINS:
        others = [arg for arg in args if arg is not NoneType]
        if len(others) == 1 and len(others) < len(args):
            return OptionSpec(resolve_type(others[0]))
        raise SchemaError(
            f"Union {tp!r} needs an explicit VariantTable (see tagged_union())"
        )

    if origin in _SEQUENCE_ORIGINS:
        return SeqSpec(_single_arg(tp, args), _SEQUENCE_ORIGINS[origin])

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SeqSpec(resolve_type(args[0]), tuple)
        if args == ((),):
            return TupleSpec([])
        return TupleSpec([resolve_type(arg) for arg in args])

    if origin is dict:
        if len(args) != 2:
            raise SchemaError(f"{tp!r}: dict needs key and value types")
        return MapSpec(resolve_type(args[0]), resolve_type(args[1]))

    if origin is not None:
        raise SchemaError(f"Unsupported generic type {tp!r}")

    if not isinstance(tp, type):
        raise SchemaError(f"Unsupported type annotation {tp!r}")

    if tp in _PLAIN_TYPES:
        return PrimitiveSpec(_PLAIN_TYPES[tp])

    if tp is int:
        raise SchemaError(
            "int needs a wire width for compact encoding "
            "(use U8..U128 or I8..I128 from tightpack)"
        )

    # the declared model fixes the layout, even for subclass instances
    if issubclass(tp, BaseModel):
        return struct_spec(tp)

    if is_decodable(tp) and is_encodable(tp):
        return CustomSpec(tp)

    if issubclass(tp, enum.Enum):
        return EnumSpec(tp)

    if tp in (list, set, frozenset, tuple, dict):
        raise SchemaError(f"{tp.__name__} needs element types, e.g. {tp.__name__}[...]")

    raise SchemaError(
        f"Unsupported type {tp.__name__}. Supported: bool, sized ints, floats, char, "
        f"str, bytes, Optional, list/set/frozenset/tuple/dict, enums, pydantic models, "
        f"tagged unions."
    )


def _single_arg(tp: Any, args: tuple[Any, ...]) -> TypeSpec:
    if len(args) != 1:
        raise SchemaError(f"{tp!r} needs exactly one element type")
    return resolve_type(args[0])
