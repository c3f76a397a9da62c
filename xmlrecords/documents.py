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
This module contains the API for converting XML documents to records and
records to XML documents.
"""
import dataclasses as dc
from collections.abc import Iterator, Mapping
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Optional
from xml.etree import ElementTree

from elementpath.etree import etree_tostring

from .aliases import DocumentType, ElementType, EventType, NsmapType, \
    SchemaSourceType, XMLSourceType
from .decoding import RecordDecoder
from .encoding import RecordEncoder
from .events import iter_events, iterparse_events
from .exceptions import XMLRecordsTypeError, XMLRecordsValueError
from .names import XMLNS
from .qnames import get_qname, split_prefixed_name
from .reflection import get_schema_type
from .settings import ConversionSettings
from .translation import gettext as _
from .utils.decoding import raw_encode_value
from .utils.logger import logged

__all__ = ['from_xml', 'from_etree', 'to_dict', 'to_etree', 'to_xml',
           'document_to_etree', 'get_namespaces']


def _iter_source_events(source: XMLSourceType) -> Iterator[EventType]:
    if hasattr(source, 'tag') or hasattr(source, 'getroot'):
        return iter_events(source)  # type: ignore[arg-type]
    elif isinstance(source, str):
        text = source.strip()
        if text.startswith('<'):
            return iterparse_events(StringIO(text))
        return iterparse_events(source)
    elif isinstance(source, bytes):
        if source.lstrip().startswith(b'<'):
            return iterparse_events(BytesIO(source))
        return iterparse_events(source.decode())
    elif isinstance(source, Path) or hasattr(source, 'read'):
        return iterparse_events(source)  # type: ignore[arg-type]

    msg = _("invalid type {!r} for an XML source")
    raise XMLRecordsTypeError(msg.format(type(source)))


@logged
def from_xml(source: XMLSourceType,
             schema: SchemaSourceType,
             settings: Optional[ConversionSettings] = None,
             **kwargs: Any) -> Any:
    """
    Converts an XML document to a record that conforms to a schema type.

    :param source: the XML source, that can be a string containing XML data, \
    bytes, a file path, a file-like object, an ElementTree Element or an ElementTree.
    :param schema: a schema type or a dataclass.
    :param settings: optional conversion settings.
    :param kwargs: conversion options that override the settings.
    :return: a record-shaped structured value.
    """
    decoder = RecordDecoder(settings, **kwargs)
    return decoder.decode(_iter_source_events(source), get_schema_type(schema))


@logged
def from_etree(root: Any,
               schema: SchemaSourceType,
               settings: Optional[ConversionSettings] = None,
               namespaces: Optional[NsmapType] = None,
               **kwargs: Any) -> Any:
    """
    Converts an ElementTree structure to a record that conforms to a schema type.

    :param root: an Element or an ElementTree instance.
    :param schema: a schema type or a dataclass.
    :param settings: optional conversion settings.
    :param namespaces: an optional map from prefixes to namespace URIs, used \
    for restoring the prefixes of element and attribute names.
    :param kwargs: conversion options that override the settings.
    """
    decoder = RecordDecoder(settings, **kwargs)
    return decoder.decode(iter_events(root, namespaces), get_schema_type(schema))


@logged
def to_dict(value: Any,
            schema: SchemaSourceType,
            settings: Optional[ConversionSettings] = None,
            **kwargs: Any) -> Any:
    """
    Converts a record to document-shaped data, a dictionary with the root
    element name as the only key.

    :param value: a record-shaped value or a dataclass instance.
    :param schema: a schema type or a dataclass.
    :param settings: optional conversion settings.
    :param kwargs: conversion options that override the settings.
    """
    if dc.is_dataclass(value) and not isinstance(value, type):
        value = dc.asdict(value)
    encoder = RecordEncoder(settings, **kwargs)
    return encoder.encode(value, get_schema_type(schema))


def get_namespaces(document: Any, settings: Optional[ConversionSettings] = None,
                   **kwargs: Any) -> dict[str, str]:
    """
    Returns the namespace declarations of document-shaped data, as a map from
    prefixes to URIs. The first declaration of a prefix wins.
    """
    settings = ConversionSettings.get_settings(settings=settings, **kwargs)
    xmlns_key = settings.xmlns_key
    namespaces: dict[str, str] = {}

    def collect(obj: Any) -> None:
        if isinstance(obj, Mapping):
            for key, value in obj.items():
                if key == xmlns_key:
                    namespaces.setdefault('', value)
                elif key.startswith(xmlns_key + ':'):
                    namespaces.setdefault(key[len(xmlns_key) + 1:], value)
                else:
                    collect(value)
        elif isinstance(obj, list):
            for item in obj:
                collect(item)

    collect(document)
    return namespaces


def document_to_etree(document: DocumentType,
                      settings: Optional[ConversionSettings] = None,
                      **kwargs: Any) -> ElementType:
    """
    Builds an ElementTree structure from document-shaped data. Prefixed names
    are mapped to namespace URIs with the namespace declarations in scope.

    :param document: a dictionary with a single item, the root element.
    :param settings: optional conversion settings.
    :param kwargs: conversion options that override the settings.
    """
    settings = ConversionSettings.get_settings(settings=settings, **kwargs)
    if not isinstance(document, Mapping):
        msg = _("invalid type {!r} for a document, must be a mapping")
        raise XMLRecordsTypeError(msg.format(type(document)))
    elif len(document) != 1:
        raise XMLRecordsValueError(_("a document must have exactly one root element"))

    (name, content), = document.items()
    return _build_element(name, content, {}, settings)


def _get_extended_name(name: str, namespaces: Mapping[str, str],
                       is_attribute: bool = False) -> str:
    prefix, local_name = split_prefixed_name(name)
    if prefix == XMLNS:
        raise XMLRecordsValueError(_("reserved name {!r}").format(name))
    elif prefix:
        try:
            return get_qname(namespaces[prefix], local_name)
        except KeyError:
            msg = _("the prefix {!r} of {!r} is not mapped to a namespace")
            raise XMLRecordsValueError(msg.format(prefix, name)) from None
    elif is_attribute:
        return local_name
    return get_qname(namespaces.get(''), local_name)


def _build_element(name: str, content: Any, namespaces: Mapping[str, str],
                   settings: ConversionSettings) -> ElementType:
    if not isinstance(content, Mapping):
        elem = ElementTree.Element(_get_extended_name(name, namespaces))
        elem.text = raw_encode_value(content)
        return elem

    xmlns_key = settings.xmlns_key
    attr_prefix = settings.attr_prefix
    content_key = settings.content_key

    xmlns = {}
    for key, value in content.items():
        if key == xmlns_key:
            xmlns[''] = value
        elif key.startswith(xmlns_key + ':'):
            xmlns[key[len(xmlns_key) + 1:]] = value
    if xmlns:
        namespaces = {**namespaces, **xmlns}

    elem = ElementTree.Element(_get_extended_name(name, namespaces))
    for key, value in content.items():
        if key == xmlns_key or key.startswith(xmlns_key + ':'):
            continue
        elif key == content_key:
            elem.text = raw_encode_value(value)
        elif key.startswith(attr_prefix):
            attr_name = _get_extended_name(key[len(attr_prefix):], namespaces, True)
            if value is not None:
                elem.set(attr_name, raw_encode_value(value))  # type: ignore[arg-type]
        elif isinstance(value, list):
            for item in value:
                elem.append(_build_element(key, item, namespaces, settings))
        else:
            elem.append(_build_element(key, value, namespaces, settings))

    return elem


@logged
def to_etree(value: Any,
             schema: SchemaSourceType,
             settings: Optional[ConversionSettings] = None,
             **kwargs: Any) -> ElementType:
    """
    Converts a record to an ElementTree structure.

    :param value: a record-shaped value or a dataclass instance.
    :param schema: a schema type or a dataclass, that must be a record type.
    :param settings: optional conversion settings.
    :param kwargs: conversion options that override the settings.
    """
    settings = ConversionSettings.get_settings(settings=settings, **kwargs)
    return document_to_etree(to_dict(value, schema, settings), settings)


@logged
def to_xml(value: Any,
           schema: SchemaSourceType,
           settings: Optional[ConversionSettings] = None,
           indent: str = '',
           xml_declaration: bool = False,
           **kwargs: Any) -> str:
    """
    Converts a record to an XML string.

    :param value: a record-shaped value or a dataclass instance.
    :param schema: a schema type or a dataclass, that must be a record type.
    :param settings: optional conversion settings.
    :param indent: the indentation string for the child elements.
    :param xml_declaration: if `True` the XML declaration is added.
    :param kwargs: conversion options that override the settings.
    """
    settings = ConversionSettings.get_settings(settings=settings, **kwargs)
    document = to_dict(value, schema, settings)
    root = document_to_etree(document, settings)

    namespaces = get_namespaces(document, settings)
    if '' in namespaces and any(not e.tag.startswith('{') for e in root.iter()):
        # A default namespace can't be used with unqualified elements
        del namespaces['']

    result = etree_tostring(
        root,
        namespaces=namespaces,
        indent=indent,
        xml_declaration=xml_declaration,
        encoding='utf-8',
    )
    if isinstance(result, bytes):
        return result.decode('utf-8')
    return result
