#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
This module contains the schema model used by converters: schema types,
field descriptors and name/namespace annotations.
"""
import dataclasses as dc
import math
from collections.abc import Iterable, Mapping, MutableSequence
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Union

from elementpath.datatypes import DateTime10, Date10, Time, Duration

from .exceptions import XMLRecordsTypeError, XMLRecordsValueError, \
    XMLRecordsTypeConversionError, XMLRecordsInternalError
from .names import PRIMITIVE_KINDS, STRING_KIND, INT_KIND, FLOAT_KIND, \
    DECIMAL_KIND, BOOLEAN_KIND, DATE_KIND, DATETIME_KIND, TIME_KIND, \
    DURATION_KIND, ANY_KIND, UNBOUNDED
from .translation import gettext as _

__all__ = ['NameNamespaceAnnotation', 'FieldDescriptor', 'SchemaType',
           'PrimitiveType', 'ArrayType', 'RecordType', 'UnionType', 'MapType',
           'TypeReference', 'resolve_type', 'STRING', 'INT', 'FLOAT',
           'DECIMAL', 'BOOLEAN', 'ANY']


@dc.dataclass(frozen=True)
class NameNamespaceAnnotation:
    """
    Markup annotations of a record type or of a record field.

    :param name: the name to use in markup instead of the field/record name.
    :param namespace: the namespace URI, `None` means no namespace annotation.
    :param prefix: the namespace prefix, `None` means the default namespace.
    :param is_attribute: if `True` the field is mapped to an attribute.
    """
    name: Optional[str] = None
    namespace: Optional[str] = None
    prefix: Optional[str] = None
    is_attribute: bool = False

    def __post_init__(self) -> None:
        # Malformed annotations degrade to no annotation
        if not self.name:
            object.__setattr__(self, 'name', None)
        if self.namespace is None or not self.prefix:
            object.__setattr__(self, 'prefix', None)

    def __bool__(self) -> bool:
        return self.name is not None or self.namespace is not None or self.is_attribute

    def merge(self, other: Optional['NameNamespaceAnnotation']) -> 'NameNamespaceAnnotation':
        """
        Returns a new annotation with name and namespace of *other* that override
        the ones of this annotation. The attribute flag is not inherited.
        """
        if other is None:
            return self

        name = other.name if other.name is not None else self.name
        if other.namespace is not None:
            namespace, prefix = other.namespace, other.prefix
        else:
            namespace, prefix = self.namespace, self.prefix
        return NameNamespaceAnnotation(name, namespace, prefix, self.is_attribute)


NO_ANNOTATION = NameNamespaceAnnotation()


class SchemaType:
    """Base class of schema types."""
    __slots__ = ('name', '__weakref__')

    name: str

    def __repr__(self) -> str:
        return '%s(name=%r)' % (self.__class__.__name__, self.name)

    def __str__(self) -> str:
        return self.name

    def resolve(self) -> 'SchemaType':
        """Returns the effective schema type, following type references."""
        return self

    def matches(self, value: Any) -> bool:
        """
        A structural predicate for checking if a value is compatible with
        the schema type. Used for selecting the member of a union.
        """
        raise NotImplementedError()

    def is_primitive(self) -> bool:
        return False

    def is_array(self) -> bool:
        return False

    def is_record(self) -> bool:
        return False

    def is_union(self) -> bool:
        return False

    def is_map(self) -> bool:
        return False


class PrimitiveType(SchemaType):
    """
    A primitive schema type. The *any* kind accepts every value and it's
    decoded to a generic structured value.

    :param kind: the primitive kind.
    :param name: an optional name, for default is the kind.
    """
    __slots__ = ('kind', '_decoder')

    _decoders: dict[str, Callable[[str], Any]] = {}

    def __init__(self, kind: str, name: Optional[str] = None) -> None:
        if kind not in PRIMITIVE_KINDS:
            raise XMLRecordsValueError(_("unknown primitive kind {!r}").format(kind))
        self.kind = kind
        self.name = name or kind
        self._decoder = self._decoders[kind]

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.kind)

    def is_primitive(self) -> bool:
        return True

    @property
    def is_any(self) -> bool:
        return self.kind == ANY_KIND

    def matches(self, value: Any) -> bool:
        kind = self.kind
        if kind == ANY_KIND:
            return True
        elif kind == BOOLEAN_KIND:
            return isinstance(value, bool)
        elif kind == INT_KIND:
            return isinstance(value, int) and not isinstance(value, bool)
        elif kind == FLOAT_KIND:
            return isinstance(value, float)
        elif kind == DECIMAL_KIND:
            return isinstance(value, Decimal)
        elif kind == STRING_KIND:
            return isinstance(value, str)
        elif kind == DATETIME_KIND:
            return isinstance(value, DateTime10)
        elif kind == DATE_KIND:
            return isinstance(value, Date10)
        elif kind == TIME_KIND:
            return isinstance(value, Time)
        else:
            return isinstance(value, Duration)

    def decode(self, text: str) -> Any:
        """
        Converts a markup text to a value of the primitive kind.

        :raises XMLRecordsTypeConversionError: if the text can't be converted.
        """
        try:
            return self._decoder(text)
        except (ValueError, TypeError, ArithmeticError) as err:
            raise XMLRecordsTypeConversionError(text, self.kind, str(err) or None) from None


def _decode_boolean(text: str) -> bool:
    value = text.strip()
    if value in ('true', '1'):
        return True
    elif value in ('false', '0'):
        return False
    raise ValueError(_("not a boolean value"))


def _decode_float(text: str) -> float:
    value = text.strip()
    if value == 'INF':
        return math.inf
    elif value == '-INF':
        return -math.inf
    elif value in ('inf', '-inf', 'infinity', '-infinity', '+INF'):
        raise ValueError(_("invalid lexical form"))
    return float(value)


def _decode_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(_("invalid decimal value")) from None
    if not value.is_finite():
        raise ValueError(_("invalid decimal value"))
    return value


PrimitiveType._decoders.update({
    STRING_KIND: str,
    ANY_KIND: str,
    INT_KIND: lambda x: int(x.strip()),
    FLOAT_KIND: _decode_float,
    DECIMAL_KIND: _decode_decimal,
    BOOLEAN_KIND: _decode_boolean,
    DATETIME_KIND: lambda x: DateTime10.fromstring(x.strip()),
    DATE_KIND: lambda x: Date10.fromstring(x.strip()),
    TIME_KIND: lambda x: Time.fromstring(x.strip()),
    DURATION_KIND: lambda x: Duration.fromstring(x.strip()),
})

STRING = PrimitiveType(STRING_KIND)
INT = PrimitiveType(INT_KIND)
FLOAT = PrimitiveType(FLOAT_KIND)
DECIMAL = PrimitiveType(DECIMAL_KIND)
BOOLEAN = PrimitiveType(BOOLEAN_KIND)
ANY = PrimitiveType(ANY_KIND)


class ArrayType(SchemaType):
    """
    An array schema type.

    :param item_type: the type of the items.
    :param size: the fixed size of the array, -1 for an unbounded array.
    """
    __slots__ = ('item_type', 'size')

    def __init__(self, item_type: SchemaType, size: int = UNBOUNDED,
                 name: Optional[str] = None) -> None:
        if not isinstance(item_type, SchemaType):
            msg = _("invalid type {!r} for array items, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(item_type)))
        if isinstance(size, bool) or not isinstance(size, int) or size < UNBOUNDED:
            raise XMLRecordsValueError(_("invalid array size {!r}").format(size))

        self.item_type = item_type
        self.size = size
        self.name = name or f'{item_type.name}[{size if size != UNBOUNDED else ""}]'

    def __repr__(self) -> str:
        if self.size == UNBOUNDED:
            return '%s(%r)' % (self.__class__.__name__, self.item_type)
        return '%s(%r, size=%d)' % (self.__class__.__name__, self.item_type, self.size)

    def is_array(self) -> bool:
        return True

    @property
    def is_fixed(self) -> bool:
        return self.size != UNBOUNDED

    def matches(self, value: Any) -> bool:
        if not isinstance(value, (MutableSequence, tuple)):
            return False
        item_type = self.item_type.resolve()
        return all(item_type.matches(item) for item in value)


@dc.dataclass(frozen=True)
class FieldDescriptor:
    """
    A descriptor of a record field.

    :param name: the raw name of the field.
    :param type: the schema type of the field.
    :param required: if `False` the field is optional.
    :param annotation: name/namespace annotation of the field.
    """
    name: str
    type: SchemaType
    required: bool = True
    annotation: NameNamespaceAnnotation = NO_ANNOTATION

    def __post_init__(self) -> None:
        if not isinstance(self.type, SchemaType):
            msg = _("invalid type {!r} for field {!r}, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(self.type), self.name))
        if self.annotation is None:
            object.__setattr__(self, 'annotation', NO_ANNOTATION)

    @property
    def is_attribute(self) -> bool:
        return self.annotation.is_attribute

    @property
    def element_annotation(self) -> NameNamespaceAnnotation:
        """
        The annotation that names the elements of the field. For an array of
        records the name annotation of the item record type overrides the
        renaming of the field.
        """
        field_type = self.type.resolve()
        if isinstance(field_type, ArrayType) and not self.is_attribute:
            item_type = field_type.item_type.resolve()
            if isinstance(item_type, RecordType) and item_type.annotation.name:
                return dc.replace(self.annotation, name=item_type.annotation.name)
        return self.annotation

    @property
    def fixed_size(self) -> Optional[int]:
        """The size of a fixed-size array field, `None` for other fields."""
        field_type = self.type.resolve()
        if isinstance(field_type, ArrayType) and field_type.is_fixed:
            return field_type.size
        return None


class RecordType(SchemaType):
    """
    A record schema type.

    :param name: the name of the record type.
    :param fields: an iterable of field descriptors, or a mapping from names \
    to field descriptors. Field order is preserved.
    :param rest_type: the type of fields that are not declared, `None` \
    means that the record is closed.
    :param annotation: the record-level name/namespace annotation.
    """
    __slots__ = ('fields', 'rest_type', 'annotation')

    fields: dict[str, FieldDescriptor]

    def __init__(self, name: str,
                 fields: Union[None, Iterable[FieldDescriptor],
                               Mapping[str, FieldDescriptor]] = None,
                 rest_type: Optional[SchemaType] = None,
                 annotation: Optional[NameNamespaceAnnotation] = None) -> None:
        self.name = name
        self.fields = {}
        self.rest_type = rest_type
        self.annotation = annotation or NO_ANNOTATION

        if isinstance(fields, Mapping):
            fields = fields.values()
        for field in fields or ():
            if not isinstance(field, FieldDescriptor):
                msg = _("invalid type {!r} for a field of {!r}, must be a FieldDescriptor")
                raise XMLRecordsTypeError(msg.format(type(field), name))
            self.fields[field.name] = field

    def __repr__(self) -> str:
        return '%s(name=%r, fields=%r)' % (self.__class__.__name__, self.name, list(self.fields))

    def is_record(self) -> bool:
        return True

    @property
    def attributes(self) -> dict[str, FieldDescriptor]:
        """The fields mapped to attributes."""
        return {k: v for k, v in self.fields.items() if v.is_attribute}

    @property
    def elements(self) -> dict[str, FieldDescriptor]:
        """The fields mapped to child elements."""
        return {k: v for k, v in self.fields.items() if not v.is_attribute}

    @property
    def element_name(self) -> str:
        """The effective local name of the record element."""
        return self.annotation.name or self.name

    def matches(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        elif any(f.required and k not in value for k, f in self.fields.items()):
            return False
        elif self.rest_type is None:
            return all(k in self.fields for k in value)
        return True


class UnionType(SchemaType):
    """A union schema type. Members are tried in declaration order."""
    __slots__ = ('members',)

    def __init__(self, members: Iterable[SchemaType], name: Optional[str] = None) -> None:
        self.members = tuple(members)
        if not self.members:
            raise XMLRecordsValueError(_("a union type needs at least a member"))
        for member in self.members:
            if not isinstance(member, SchemaType):
                msg = _("invalid type {!r} for a member of a union, must be a SchemaType")
                raise XMLRecordsTypeError(msg.format(type(member)))
        self.name = name or '|'.join(m.name for m in self.members)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, list(self.members))

    def is_union(self) -> bool:
        return True

    def matches(self, value: Any) -> bool:
        return any(m.resolve().matches(value) for m in self.members)

    def select_member(self, value: Any) -> Optional[SchemaType]:
        """Returns the first declared member that matches the value, `None` if no match."""
        for member in self.members:
            member = member.resolve()
            if member.matches(value):
                return member
        return None


class MapType(SchemaType):
    """A mapping from string keys to values of the same type."""
    __slots__ = ('value_type',)

    def __init__(self, value_type: SchemaType, name: Optional[str] = None) -> None:
        if not isinstance(value_type, SchemaType):
            msg = _("invalid type {!r} for map values, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(value_type)))
        self.value_type = value_type
        self.name = name or f'map<{value_type.name}>'

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.value_type)

    def is_map(self) -> bool:
        return True

    def matches(self, value: Any) -> bool:
        if not isinstance(value, Mapping):
            return False
        value_type = self.value_type.resolve()
        return all(value_type.matches(v) for v in value.values())


class TypeReference(SchemaType):
    """
    A named reference to another schema type, used for aliased and for
    recursive record types. The target can be bound only once.
    """
    __slots__ = ('_target',)

    def __init__(self, name: str, target: Optional[SchemaType] = None) -> None:
        self.name = name
        self._target: Optional[SchemaType] = None
        if target is not None:
            self.bind(target)

    def bind(self, target: SchemaType) -> None:
        if not isinstance(target, SchemaType):
            msg = _("invalid type {!r} for a reference target, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(target)))
        elif self._target is not None:
            raise XMLRecordsValueError(_("reference {!r} is already bound").format(self.name))
        self._target = target

    def resolve(self) -> SchemaType:
        target = self._target
        while isinstance(target, TypeReference):
            target = target._target
        if target is None:
            raise XMLRecordsInternalError(_("unbound type reference {!r}").format(self.name))
        return target

    def matches(self, value: Any) -> bool:
        return self.resolve().matches(value)


def resolve_type(schema_type: SchemaType) -> SchemaType:
    """Resolves referenced/aliased types to their underlying definition."""
    if not isinstance(schema_type, SchemaType):
        msg = _("invalid type {!r}, must be a SchemaType")
        raise XMLRecordsTypeError(msg.format(type(schema_type)))
    return schema_type.resolve()
