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
This module contains the builder of schema types from Python dataclasses
and typing annotations.
"""
import dataclasses as dc
import types
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from decimal import Decimal
from typing import Annotated, Any, Optional, Union, get_args, get_origin, get_type_hints

from elementpath.datatypes import DateTime10, Date10, Time, Duration

from .aliases import SchemaSourceType
from .caching import ComputeOnceCache
from .exceptions import XMLRecordsTypeError, XMLRecordsValueError
from .names import DATE_KIND, DATETIME_KIND, TIME_KIND, DURATION_KIND
from .translation import gettext as _
from .types import NameNamespaceAnnotation, FieldDescriptor, SchemaType, \
    PrimitiveType, ArrayType, RecordType, UnionType, MapType, TypeReference, \
    STRING, INT, FLOAT, DECIMAL, BOOLEAN, ANY

__all__ = ['FixedSize', 'xml_field', 'get_schema_type', 'record_cache',
           'XML_NAME', 'XML_NAMESPACE', 'XML_PREFIX', 'XML_ATTRIBUTE']

XML_NAME = 'xml_name'
XML_NAMESPACE = 'xml_namespace'
XML_PREFIX = 'xml_prefix'
XML_ATTRIBUTE = 'xml_attribute'

PRIMITIVE_TYPES: dict[Any, PrimitiveType] = {
    str: STRING,
    int: INT,
    float: FLOAT,
    Decimal: DECIMAL,
    bool: BOOLEAN,
    Any: ANY,
    object: ANY,
    DateTime10: PrimitiveType(DATETIME_KIND),
    Date10: PrimitiveType(DATE_KIND),
    Time: PrimitiveType(TIME_KIND),
    Duration: PrimitiveType(DURATION_KIND),
}


@dc.dataclass(frozen=True)
class FixedSize:
    """Typing metadata for fixed-size arrays, e.g. `Annotated[list[int], FixedSize(3)]`."""
    size: int

    def __post_init__(self) -> None:
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise XMLRecordsValueError(_("invalid fixed size {!r}").format(self.size))


def xml_field(*, name: Optional[str] = None,
              namespace: Optional[str] = None,
              prefix: Optional[str] = None,
              attribute: bool = False,
              **kwargs: Any) -> Any:
    """
    A wrapper of `dataclasses.field()` that adds markup annotations
    to the metadata of a dataclass field.

    :param name: the element or attribute name to use instead of the field name.
    :param namespace: the namespace URI of the element or attribute.
    :param prefix: the namespace prefix.
    :param attribute: map the field to an attribute.
    :param kwargs: other arguments for `dataclasses.field()`.
    """
    metadata = dict(kwargs.pop('metadata', None) or ())
    metadata[XML_NAME] = name
    metadata[XML_NAMESPACE] = namespace
    metadata[XML_PREFIX] = prefix
    metadata[XML_ATTRIBUTE] = attribute
    return dc.field(metadata=metadata, **kwargs)


def _split_annotated(hint: Any) -> tuple[Any, list[Any]]:
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, metadata
    return hint, []


def _split_optional(hint: Any) -> tuple[Any, bool]:
    """Returns the hint without `None` and a flag that is `True` if `None` was included."""
    origin = get_origin(hint)
    if origin is Union or origin is types.UnionType:
        args = get_args(hint)
        if type(None) in args:
            args = tuple(x for x in args if x is not type(None))
            if len(args) == 1:
                return args[0], True
            return Union[args], True
    return hint, False


class _SchemaTypeBuilder:
    """Builds schema types from typing hints. Recursive dataclasses are bound by references."""

    def __init__(self) -> None:
        self.pending: dict[type, Optional[TypeReference]] = {}

    def build(self, hint: Any) -> SchemaType:
        if isinstance(hint, SchemaType):
            return hint

        hint, metadata = _split_annotated(hint)
        hint, _optional = _split_optional(hint)

        sizes = [x.size for x in metadata if isinstance(x, FixedSize)]
        schema_type = self.build_type(hint, sizes[-1] if sizes else None)
        if sizes and not isinstance(schema_type, ArrayType):
            msg = _("FixedSize can be applied only to arrays, not to {!r}")
            raise XMLRecordsTypeError(msg.format(hint))
        return schema_type

    def build_type(self, hint: Any, size: Optional[int] = None) -> SchemaType:
        try:
            return PRIMITIVE_TYPES[hint]
        except (KeyError, TypeError):
            pass

        if isinstance(hint, type) and dc.is_dataclass(hint):
            return self.build_record(hint)

        origin = get_origin(hint)
        args = get_args(hint)

        if origin is Union or origin is types.UnionType:
            return UnionType([self.build(x) for x in args])
        elif origin in (list, MutableSequence, Sequence) or hint is list:
            item_type = self.build(args[0]) if args else ANY
            return ArrayType(item_type) if size is None else ArrayType(item_type, size)
        elif origin is tuple:
            if not args:
                return ArrayType(ANY) if size is None else ArrayType(ANY, size)
            elif len(args) == 2 and args[1] is Ellipsis:
                item_type = self.build(args[0])
                return ArrayType(item_type) if size is None else ArrayType(item_type, size)

            item_types = [self.build(x) for x in args]
            if all(x is item_types[0] for x in item_types):
                return ArrayType(item_types[0], len(args))
            return ArrayType(UnionType(item_types), len(args))
        elif origin in (dict, Mapping, MutableMapping) or hint is dict:
            if args and args[0] is not str:
                msg = _("map keys must be strings, not {!r}")
                raise XMLRecordsTypeError(msg.format(args[0]))
            return MapType(self.build(args[1]) if args else ANY)

        msg = _("can't build a schema type from {!r}")
        raise XMLRecordsTypeError(msg.format(hint))

    def build_record(self, cls: type) -> SchemaType:
        if cls in self.pending:
            ref = self.pending[cls]
            if ref is None:
                ref = self.pending[cls] = TypeReference(cls.__name__)
            return ref
        elif cls in record_cache:
            return record_cache(cls)

        self.pending[cls] = None
        try:
            hints = get_type_hints(cls, include_extras=True)
            fields = []
            for field in dc.fields(cls):
                fields.append(self.build_field(field, hints.get(field.name, Any)))

            rest_type = getattr(cls, '__xml_rest__', None)
            if rest_type is not None:
                rest_type = self.build(rest_type)

            annotation = NameNamespaceAnnotation(
                name=getattr(cls, '__xml_name__', None),
                namespace=getattr(cls, '__xml_namespace__', None),
                prefix=getattr(cls, '__xml_prefix__', None),
            )
            record_type = RecordType(cls.__name__, fields, rest_type, annotation)
        finally:
            ref = self.pending.pop(cls)

        if ref is not None:
            ref.bind(record_type)
        return record_type

    def build_field(self, field: dc.Field[Any], hint: Any) -> FieldDescriptor:
        base, _metadata = _split_annotated(hint)
        _hint, optional = _split_optional(base)
        has_default = field.default is not dc.MISSING or \
            field.default_factory is not dc.MISSING

        metadata = field.metadata
        annotation = NameNamespaceAnnotation(
            name=metadata.get(XML_NAME),
            namespace=metadata.get(XML_NAMESPACE),
            prefix=metadata.get(XML_PREFIX),
            is_attribute=bool(metadata.get(XML_ATTRIBUTE)),
        )
        return FieldDescriptor(
            name=field.name,
            type=self.build(hint),
            required=not optional and not has_default,
            annotation=annotation,
        )


def _build_record_type(cls: type) -> SchemaType:
    return _SchemaTypeBuilder().build_record(cls)


record_cache: ComputeOnceCache[type, SchemaType] = ComputeOnceCache(_build_record_type)
"""The cache of the record types built from dataclasses."""


def get_schema_type(source: SchemaSourceType) -> SchemaType:
    """
    Returns a schema type from a source, that can be a schema type instance,
    a dataclass or a typing hint composed by primitive types, dataclasses,
    unions, lists, tuples and dictionaries with string keys.

    :param source: a schema type, a dataclass or a typing hint.
    """
    if isinstance(source, SchemaType):
        return source
    elif isinstance(source, type) and dc.is_dataclass(source):
        return record_cache(source)
    return _SchemaTypeBuilder().build(source)
