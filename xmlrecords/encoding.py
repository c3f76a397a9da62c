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
This module contains the encoder of records to document-shaped data.
"""
import dataclasses as dc
from collections.abc import Mapping, MutableSequence
from typing import Any, Optional

from .aliases import DocumentType
from .exceptions import XMLRecordsSchemaConflict, XMLRecordsTypeConversionError, \
    XMLRecordsTypeError
from .qnames import get_prefixed_name, split_prefixed_name
from .scopes import ScopeStack
from .settings import ConversionSettings
from .translation import gettext as _
from .types import NameNamespaceAnnotation, SchemaType, FieldDescriptor, \
    ArrayType, RecordType, UnionType, MapType
from .utils.logger import logger, logged, format_path

__all__ = ['RecordEncoder', 'encode_record']


class RecordEncoder:
    """
    A schema-directed encoder of records to document-shaped data. The result
    is a nested dictionary where keys are prefixed element names, attributes
    are keys with the *attr_prefix* and namespace declarations are attribute
    keys named *xmlns* or *xmlns:<prefix>*.

    :param settings: an optional `ConversionSettings` instance.
    :param kwargs: options that override the provided or the default settings.
    """
    def __init__(self, settings: Optional[ConversionSettings] = None, **kwargs: Any) -> None:
        self.settings = ConversionSettings.get_settings(settings=settings, **kwargs)

    def __repr__(self) -> str:
        return '%s(settings=%r)' % (self.__class__.__name__, self.settings)

    @logged
    def encode(self, value: Any, schema_type: SchemaType) -> Any:
        """
        Encodes a structured value to document-shaped data.

        :param value: a record-shaped value, usually a dictionary.
        :param schema_type: the schema type of the value.
        :return: for a record type a single-entry dictionary with the \
        root element name as key. For a map of arrays of records a dictionary \
        with the original keys and the encoded records without the root wrappers. \
        Values of other types are returned unchanged.
        """
        if not isinstance(schema_type, SchemaType):
            msg = _("invalid type {!r} for schema_type, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(schema_type)))

        schema_type = schema_type.resolve()
        if isinstance(schema_type, UnionType):
            member = self.select_member(value, schema_type, [])
            return self.encode(value, member)

        scopes = ScopeStack()
        if isinstance(schema_type, RecordType):
            key, content = self.encode_record(
                value, schema_type, scopes, [schema_type.name], default_name=schema_type.name
            )
            return {key: content}
        elif isinstance(schema_type, MapType):
            return self.encode_map(value, schema_type, scopes, [])
        return value

    def encode_record(self, value: Any,
                      record_type: RecordType,
                      scopes: ScopeStack,
                      path: list[str],
                      annotation: Optional[NameNamespaceAnnotation] = None,
                      default_name: Optional[str] = None) -> tuple[str, dict[str, Any]]:
        """
        Encodes a record value, returning a couple with the element key and the
        element content. The annotation of the field that contains the record,
        if any, overrides the annotation of the record type.
        """
        if not isinstance(value, Mapping):
            reason = _("a record value must be a mapping")
            raise XMLRecordsTypeConversionError(
                value, record_type.name, reason, format_path(path)
            )

        effective = record_type.annotation.merge(annotation)
        name = effective.name or default_name or record_type.name
        key = get_prefixed_name(effective.prefix, name)

        content: dict[str, Any] = {}
        if effective.namespace:
            content[self.settings.get_xmlns_key(effective.prefix)] = effective.namespace

        scopes.push(record_type)
        try:
            for field_name, item in value.items():
                field = record_type.fields.get(field_name)
                if field is None:
                    if field_name in content:
                        raise XMLRecordsSchemaConflict(field_name, record_type.name)
                    content[field_name] = item
                elif item is not None:
                    self.encode_field(item, field, content, scopes, path + [field_name])
        finally:
            scopes.pop()

        return key, content

    def encode_field(self, value: Any,
                     field: FieldDescriptor,
                     content: dict[str, Any],
                     scopes: ScopeStack,
                     path: list[str]) -> None:
        """Encodes the value of a record field, adding it to the element content."""
        field_type = field.type.resolve()
        if isinstance(field_type, UnionType):
            field_type = self.select_member(value, field_type, path)

        if isinstance(field_type, RecordType):
            key, child = self.encode_record(
                value, field_type, scopes, path, field.annotation, field.name
            )
            self.put_content(content, key, child, path)

        elif isinstance(field_type, ArrayType):
            if not isinstance(value, (MutableSequence, tuple)):
                reason = _("an array value must be a list or a tuple")
                raise XMLRecordsTypeConversionError(
                    value, field_type.name, reason, format_path(path)
                )
            self.encode_array(value, field, field_type, content, scopes, path)

        elif isinstance(field_type, MapType):
            key = self.get_element_key(field)
            self.put_content(content, key, self.encode_map(value, field_type, scopes, path), path)

        elif field.is_attribute:
            self.put_attribute(content, field, value)

        elif field.name == self.settings.content_key:
            content[self.settings.content_key] = value
        else:
            key = self.get_element_key(field)
            self.put_content(content, key, self.encode_simple_element(value, field), path)

    def encode_array(self, value: Any,
                     field: FieldDescriptor,
                     array_type: ArrayType,
                     content: dict[str, Any],
                     scopes: ScopeStack,
                     path: list[str]) -> None:
        item_type = array_type.item_type.resolve()

        if field.is_attribute:
            self.put_attribute(content, field, list(value))
            return

        annotation = field.element_annotation
        key = self.get_element_key(field)
        items = []
        for item in value:
            member = item_type
            if isinstance(member, UnionType):
                member = self.select_member(item, member, path)

            if isinstance(member, RecordType):
                member_annotation = annotation
                if member is not item_type and annotation.name is None:
                    # Records of a union share the element name of the field
                    member_annotation = dc.replace(
                        annotation, name=split_prefixed_name(field.name)[1]
                    )

                # The item wrapper is stripped, the key is the item's element name
                key, child = self.encode_record(
                    item, member, scopes, path, member_annotation, key
                )
                items.append(child)
            elif isinstance(member, MapType):
                items.append(self.encode_map(item, member, scopes, path))
            else:
                items.append(self.encode_simple_element(item, field))

        self.put_content(content, key, items, path)

    def encode_map(self, value: Any,
                   map_type: MapType,
                   scopes: ScopeStack,
                   path: list[str]) -> dict[str, Any]:
        """
        Encodes a map value. Records in map values are stripped of their root
        wrapper, so the original keys are preserved.
        """
        if not isinstance(value, Mapping):
            reason = _("a map value must be a mapping")
            raise XMLRecordsTypeConversionError(value, map_type.name, reason, format_path(path))

        value_type = map_type.value_type.resolve()
        result: dict[str, Any] = {}
        for key, item in value.items():
            item_path = path + [key]
            item_type = value_type
            if isinstance(item_type, UnionType):
                item_type = self.select_member(item, item_type, item_path)

            if isinstance(item_type, RecordType):
                result[key] = self.encode_record(item, item_type, scopes, item_path)[1]
            elif isinstance(item_type, ArrayType) and \
                    isinstance(item_type.item_type.resolve(), RecordType):
                record_type = item_type.item_type.resolve()
                result[key] = [
                    self.encode_record(x, record_type, scopes, item_path)[1] for x in item
                ]
            elif isinstance(item_type, MapType):
                result[key] = self.encode_map(item, item_type, scopes, item_path)
            else:
                result[key] = item
        return result

    def encode_simple_element(self, value: Any, field: FieldDescriptor) -> Any:
        """
        Encodes the value of an element with a primitive type. An element
        with a namespace annotation is encoded to a mapping with the namespace
        declaration and the value under the content key.
        """
        namespace = field.annotation.namespace
        if not namespace:
            return value
        return {
            self.settings.get_xmlns_key(field.annotation.prefix): namespace,
            self.settings.content_key: value,
        }

    def get_element_key(self, field: FieldDescriptor) -> str:
        """
        Returns the element key of a field. The renaming applies only to the local
        part of the name, the namespace prefix is preserved.
        """
        annotation = field.element_annotation
        prefix, name = split_prefixed_name(field.name)
        if annotation.name:
            name = annotation.name
        if annotation.namespace is not None:
            prefix = annotation.prefix or ''
        return get_prefixed_name(prefix, name)

    def put_content(self, content: dict[str, Any], key: str, value: Any,
                    path: list[str]) -> None:
        """
        Puts an element value into the content of the parent element. If the key
        is already used by an element with attributes the value is nested under
        the content key.
        """
        if key not in content:
            content[key] = value
            return

        other = content[key]
        content_key = self.settings.content_key
        if isinstance(other, dict) and content_key not in other and \
                not isinstance(value, (Mapping, MutableSequence)):
            logger.debug("value of %s nested under %r", format_path(path), content_key)
            other[content_key] = value
        else:
            raise XMLRecordsSchemaConflict(key)

    def put_attribute(self, content: dict[str, Any], field: FieldDescriptor,
                      value: Any) -> None:
        """
        Puts an attribute value into the content of an element, with the namespace
        declaration of a prefixed attribute.
        """
        annotation = field.annotation
        key = self.settings.attr_prefix + self.get_element_key(field)
        if key in content:
            raise XMLRecordsSchemaConflict(key)

        if annotation.namespace and annotation.prefix:
            content[self.settings.get_xmlns_key(annotation.prefix)] = annotation.namespace
        content[key] = value

    def select_member(self, value: Any, union_type: UnionType, path: list[str]) -> SchemaType:
        """Selects the first member of a union type that matches the value."""
        member = union_type.select_member(value)
        if member is None:
            reason = _("no member of the union matches")
            raise XMLRecordsTypeConversionError(
                value, union_type.name, reason, format_path(path)
            )
        return member


def encode_record(value: Any, schema_type: SchemaType,
                  settings: Optional[ConversionSettings] = None,
                  **kwargs: Any) -> DocumentType:
    """
    Encodes a record to document-shaped data, using a new encoder instance.

    :param value: the record-shaped value.
    :param schema_type: the schema type of the value.
    :param settings: optional conversion settings.
    :param kwargs: options that override the settings.
    """
    return RecordEncoder(settings, **kwargs).encode(value, schema_type)
