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
This module contains the decoder of markup node streams to records.
"""
from collections.abc import Iterable, Iterator, MutableSequence
from typing import Any, Optional

from .aliases import EventType, EventStreamType
from .exceptions import XMLRecordsConversionError, XMLRecordsSchemaConflict, \
    XMLRecordsInternalError, XMLRecordsTypeConversionError, XMLRecordsUnknownMember, \
    XMLRecordsMissingField, XMLRecordsMissingAttribute, XMLRecordsArraySizeError, \
    XMLRecordsNameMismatch, XMLRecordsNamespaceMismatch, XMLRecordsTypeError
from .events import StartElement, EndElement, Text
from .qnames import lookup_name
from .scopes import Scope, ScopeStack
from .settings import ConversionSettings
from .translation import gettext as _
from .types import NameNamespaceAnnotation, FieldDescriptor, SchemaType, PrimitiveType, \
    ArrayType, RecordType, UnionType, MapType
from .utils.logger import logger, logged, format_path

__all__ = ['RecordDecoder', 'decode_events']


class RecordDecoder:
    """
    A schema-directed decoder of markup node streams to structured values.
    The decoder consumes a stream of `StartElement`, `Text` and `EndElement`
    events in document order and builds the structured value with a recursive
    descent, using a scope stack that follows the nesting of record types.
    A decoder instance can be reused: each decoding call has its own stack.

    :param settings: an optional `ConversionSettings` instance.
    :param kwargs: options that override the provided or the default settings.
    """
    def __init__(self, settings: Optional[ConversionSettings] = None, **kwargs: Any) -> None:
        self.settings = ConversionSettings.get_settings(settings=settings, **kwargs)

    def __repr__(self) -> str:
        return '%s(settings=%r)' % (self.__class__.__name__, self.settings)

    @logged
    def decode(self, events: EventStreamType, schema_type: SchemaType) -> Any:
        """
        Decodes a node stream to a structured value that conforms to a schema type.

        :param events: an iterable of node stream events, starting with the \
        root element. Text events before the root element are ignored.
        :param schema_type: the schema type of the root element.
        :return: the decoded value. For a record type is a dictionary that maps \
        field names to values.
        :raises XMLRecordsConversionError: if the node stream doesn't conform \
        to the schema type. No partial result is returned.
        """
        if not isinstance(schema_type, SchemaType):
            msg = _("invalid type {!r} for schema_type, must be a SchemaType")
            raise XMLRecordsTypeError(msg.format(type(schema_type)))

        stream = iter(events)
        for event in stream:
            if isinstance(event, StartElement):
                break
            elif not isinstance(event, Text):
                msg = _("unexpected event {!r} before the root element")
                raise XMLRecordsInternalError(msg.format(event))
        else:
            raise XMLRecordsInternalError(_("the node stream has no root element"))

        schema_type = schema_type.resolve()
        if isinstance(schema_type, RecordType) and self.settings.check_names:
            name = schema_type.annotation.name
            if name is not None and name != event.name.local_name:
                raise XMLRecordsNameMismatch(name, event.name.local_name)

        scopes = ScopeStack()
        path = [event.name.local_name]
        result = self.decode_element(event, stream, schema_type, scopes, path)
        if scopes:
            raise XMLRecordsInternalError(_("unbalanced scope stack after decoding"))
        return result

    def decode_element(self, start: StartElement,
                       events: Iterator[EventType],
                       schema_type: SchemaType,
                       scopes: ScopeStack,
                       path: list[str],
                       annotation: Optional[NameNamespaceAnnotation] = None) -> Any:
        """
        Decodes an element with a schema type, consuming the events of the
        element's content up to the end of the element.

        :param start: the start event of the element.
        :param events: an iterator on the events that follow the start event.
        :param schema_type: the expected schema type.
        :param scopes: the scope stack of the decoding call.
        :param path: the list of local names from the root to the element.
        :param annotation: the annotation of the field that matches the element.
        """
        schema_type = schema_type.resolve()

        if isinstance(schema_type, RecordType):
            return self.decode_record(start, events, schema_type, scopes, path, annotation)
        elif isinstance(schema_type, UnionType):
            return self.decode_union(start, events, schema_type, scopes, path, annotation)
        elif isinstance(schema_type, ArrayType):
            # A single occurrence: arrays are accumulated by the caller
            return self.decode_element(
                start, events, schema_type.item_type, scopes, path, annotation
            )
        elif isinstance(schema_type, MapType):
            return self.decode_map(start, events, schema_type, scopes, path)
        elif isinstance(schema_type, PrimitiveType):
            if schema_type.is_any:
                return self.decode_any(start, events)
            return self.decode_simple_content(start, events, schema_type, path)
        else:
            msg = _("unsupported schema type {!r}")
            raise XMLRecordsInternalError(msg.format(schema_type))

    def decode_record(self, start: StartElement,
                      events: Iterator[EventType],
                      record_type: RecordType,
                      scopes: ScopeStack,
                      path: list[str],
                      annotation: Optional[NameNamespaceAnnotation] = None) -> dict[str, Any]:
        """Decodes an element with a record type."""
        if self.settings.check_names:
            namespace = record_type.annotation.merge(annotation).namespace
            if namespace is not None and namespace != start.name.namespace:
                raise XMLRecordsNamespaceMismatch(
                    record_type.name, namespace, start.name.namespace
                )

        content_key = self.settings.content_key
        scope = scopes.push(record_type)
        try:
            result: dict[str, Any] = {}
            seen_attributes: set[str] = set()
            self._decode_attributes(start, scope, result, seen_attributes, path)

            chunks = []
            for event in events:
                if isinstance(event, StartElement):
                    self._decode_child(event, events, scope, scopes, result, path)
                elif isinstance(event, Text):
                    chunks.append(event.value)
                elif isinstance(event, EndElement):
                    break
            else:
                raise XMLRecordsInternalError(_("unexpected end of the node stream"))

            text = ''.join(chunks)
            if text and (text.strip() or not self.settings.strip_whitespace):
                content_field = record_type.fields.get(content_key)
                if content_field is not None and not content_field.is_attribute:
                    result[content_field.name] = self.decode_text(
                        text, content_field.type, path
                    )
                elif scope.rest_type is not None:
                    result[content_key] = self.decode_text(text, scope.rest_type, path)
                else:
                    logger.debug("character data of %s dropped", format_path(path))

            self.validate_scope(result, scope, seen_attributes, path)
            return result
        finally:
            scopes.pop()

    def _decode_attributes(self, start: StartElement,
                           scope: Scope,
                           result: dict[str, Any],
                           seen_attributes: set[str],
                           path: list[str]) -> None:
        for qname, value in start.attributes.items():
            field = lookup_name(scope.attribute_index, qname)
            if field is not None:
                result[field.name] = self.decode_text(value, field.type, path)
                seen_attributes.add(field.name)
                continue

            rest_type = scope.rest_type.resolve() if scope.rest_type is not None else None
            if isinstance(rest_type, (PrimitiveType, UnionType)):
                result[qname.local_name] = self.decode_text(value, rest_type, path)
            elif self.settings.unknown_members == 'error':
                raise XMLRecordsUnknownMember(f'@{qname.prefixed_name}', format_path(path))
            else:
                logger.debug("unknown attribute %r of %s ignored", str(qname), format_path(path))

    def _decode_child(self, start: StartElement,
                      events: Iterator[EventType],
                      scope: Scope,
                      scopes: ScopeStack,
                      result: dict[str, Any],
                      path: list[str]) -> None:
        child_path = path + [start.name.local_name]
        field = lookup_name(scope.element_index, start.name)

        if field is not None:
            field_type = field.type.resolve()
            value = self.decode_element(
                start, events, field_type, scopes, child_path, field.element_annotation
            )
            if isinstance(field_type, ArrayType):
                result.setdefault(field.name, []).append(value)
            elif field.name in result:
                reason = _("multiple occurrences of a non-array field")
                raise XMLRecordsTypeConversionError(
                    start.name.local_name, field.type, reason, format_path(child_path)
                )
            else:
                result[field.name] = value

        elif scope.rest_type is not None:
            key = start.name.local_name
            rest_type = scope.rest_type.resolve()
            logger.debug("element %s routed to the rest type %r",
                         format_path(child_path), rest_type.name)

            value = self.decode_element(start, events, rest_type, scopes, child_path)
            if isinstance(rest_type, ArrayType):
                result.setdefault(key, []).append(value)
            elif key not in result:
                result[key] = value
            elif isinstance(result[key], MutableSequence) and \
                    not isinstance(value, MutableSequence):
                result[key].append(value)
            else:
                result[key] = [result[key], value]

        elif self.settings.unknown_members == 'error':
            raise XMLRecordsUnknownMember(start.name.prefixed_name, format_path(child_path))
        else:
            logger.debug("unknown element %s ignored", format_path(child_path))
            skip_element(events)

    def decode_union(self, start: StartElement,
                     events: Iterator[EventType],
                     union_type: UnionType,
                     scopes: ScopeStack,
                     path: list[str],
                     annotation: Optional[NameNamespaceAnnotation] = None) -> Any:
        """
        Decodes an element with a union type. The member types are tried in
        declaration order on the buffered content of the element and the first
        member that decodes the content without errors is selected.
        """
        buffer = collect_element(events)
        for member in union_type.members:
            try:
                return self.decode_element(
                    start, iter(buffer), member, scopes, path, annotation
                )
            except XMLRecordsSchemaConflict:
                raise
            except XMLRecordsConversionError as err:
                logger.debug("member %r of %r doesn't match %s: %s",
                             member.name, union_type.name, format_path(path), err.message)

        text = ''.join(e.value for e in buffer if isinstance(e, Text))
        reason = _("no member of the union matches")
        raise XMLRecordsTypeConversionError(
            text.strip() or start.name.local_name, union_type.name, reason, format_path(path)
        )

    def decode_map(self, start: StartElement,
                   events: Iterator[EventType],
                   map_type: MapType,
                   scopes: ScopeStack,
                   path: list[str]) -> dict[str, Any]:
        """Decodes the child elements of an element to a map of values of the same type."""
        value_type = map_type.value_type.resolve()
        result: dict[str, Any] = {}
        for event in events:
            if isinstance(event, StartElement):
                key = event.name.local_name
                value = self.decode_element(event, events, value_type, scopes, path + [key])
                if isinstance(value_type, ArrayType):
                    result.setdefault(key, []).append(value)
                elif key in result:
                    reason = _("multiple occurrences of a map entry")
                    raise XMLRecordsTypeConversionError(
                        key, map_type.name, reason, format_path(path + [key])
                    )
                else:
                    result[key] = value
            elif isinstance(event, EndElement):
                return result
        raise XMLRecordsInternalError(_("unexpected end of the node stream"))

    def decode_simple_content(self, start: StartElement,
                              events: Iterator[EventType],
                              primitive_type: PrimitiveType,
                              path: list[str]) -> Any:
        """Decodes an element with a primitive type. Child elements are not allowed."""
        chunks = []
        for event in events:
            if isinstance(event, Text):
                chunks.append(event.value)
            elif isinstance(event, EndElement):
                break
            else:
                reason = _("an element with a primitive type can't have child elements")
                raise XMLRecordsTypeConversionError(
                    event.name.local_name, primitive_type.kind, reason, format_path(path)
                )
        else:
            raise XMLRecordsInternalError(_("unexpected end of the node stream"))

        return self.decode_text(''.join(chunks), primitive_type, path)

    def decode_text(self, text: str, schema_type: SchemaType, path: list[str]) -> Any:
        """
        Decodes a text, of an attribute or of an element, to a value of a schema
        type. Arrays are decoded from whitespace separated lists of items.
        """
        schema_type = schema_type.resolve()

        try:
            if isinstance(schema_type, PrimitiveType):
                return schema_type.decode(text)
            elif isinstance(schema_type, ArrayType):
                return [self.decode_text(x, schema_type.item_type, path) for x in text.split()]
            elif isinstance(schema_type, UnionType):
                for member in schema_type.members:
                    try:
                        return self.decode_text(text, member, path)
                    except XMLRecordsTypeConversionError:
                        continue
                raise XMLRecordsTypeConversionError(
                    text, schema_type.name, _("no member of the union matches")
                )
            else:
                raise XMLRecordsTypeConversionError(
                    text, schema_type.name, _("character data can't be converted to a {}")
                    .format(schema_type.__class__.__name__)
                )
        except XMLRecordsTypeConversionError as err:
            if err.path is None:
                err.path = format_path(path)
            raise

    def decode_any(self, start: StartElement, events: Iterator[EventType]) -> Any:
        """
        Decodes an element to a generic structured value. An element without
        attributes and child elements is decoded to its text, otherwise to a
        dictionary where repeated child names are collected in lists.
        """
        content_key = self.settings.content_key
        result: dict[str, Any] = {
            qname.local_name: value for qname, value in start.attributes.items()
        }
        chunks = []
        has_children = False

        for event in events:
            if isinstance(event, StartElement):
                has_children = True
                key = event.name.local_name
                value = self.decode_any(event, events)
                if key not in result:
                    result[key] = value
                elif isinstance(result[key], list):
                    result[key].append(value)
                else:
                    result[key] = [result[key], value]
            elif isinstance(event, Text):
                chunks.append(event.value)
            elif isinstance(event, EndElement):
                break
        else:
            raise XMLRecordsInternalError(_("unexpected end of the node stream"))

        text = ''.join(chunks)
        if not has_children and not start.attributes:
            return text
        elif text.strip() or text and not self.settings.strip_whitespace:
            result[content_key] = text
        return result

    def validate_scope(self, result: dict[str, Any],
                       scope: Scope,
                       seen_attributes: Iterable[str],
                       path: list[str]) -> None:
        """
        Validates the decoded fields of a record at the exit of its scope.

        :raises XMLRecordsArraySizeError: if a fixed-size array field has \
        a different number of items.
        :raises XMLRecordsMissingField: if a required element field is missing.
        :raises XMLRecordsMissingAttribute: if a required attribute is missing.
        """
        record_name = scope.record_type.name
        for field in scope.element_index.values():
            self.check_array_size(result, field, path)
            if field.required and field.name not in result:
                raise XMLRecordsMissingField(field.name, record_name, format_path(path))

        for field in scope.attribute_index.values():
            self.check_array_size(result, field, path)
            if field.required and field.name not in seen_attributes:
                raise XMLRecordsMissingAttribute(field.name, record_name, format_path(path))

    @staticmethod
    def check_array_size(result: dict[str, Any], field: FieldDescriptor,
                         path: list[str]) -> None:
        size = field.fixed_size
        if size is not None and (field.name in result or field.required):
            actual = len(result.get(field.name, ()))
            if actual != size:
                raise XMLRecordsArraySizeError(field.name, size, actual, format_path(path))


###
# Helpers for node streams

def collect_element(events: Iterator[EventType]) -> list[EventType]:
    """
    Collects the events of the content of an element, up to the end
    of the element included.
    """
    buffer: list[EventType] = []
    depth = 0
    for event in events:
        buffer.append(event)
        if isinstance(event, StartElement):
            depth += 1
        elif isinstance(event, EndElement):
            if not depth:
                return buffer
            depth -= 1
    raise XMLRecordsInternalError(_("unexpected end of the node stream"))


def skip_element(events: Iterator[EventType]) -> None:
    """Consumes the events of an element's content, up to the end of the element."""
    depth = 0
    for event in events:
        if isinstance(event, StartElement):
            depth += 1
        elif isinstance(event, EndElement):
            if not depth:
                return
            depth -= 1
    raise XMLRecordsInternalError(_("unexpected end of the node stream"))


def decode_events(events: EventStreamType, schema_type: SchemaType,
                  settings: Optional[ConversionSettings] = None, **kwargs: Any) -> Any:
    """
    Decodes a node stream to a structured value, using a new decoder instance.

    :param events: an iterable of node stream events.
    :param schema_type: the schema type of the root element.
    :param settings: optional conversion settings.
    :param kwargs: options that override the settings.
    """
    return RecordDecoder(settings, **kwargs).decode(events, schema_type)
