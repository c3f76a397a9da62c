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
This module contains the node stream consumed by the document-to-record
decoder and the adapters from ElementTree structures and parsers.
"""
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any, IO, NamedTuple, Optional, Union
from xml.etree import ElementTree

from .aliases import ElementType, EventType, NsmapType
from .exceptions import XMLRecordsTypeError
from .qnames import QualifiedName, get_namespace
from .translation import gettext as _

__all__ = ['StartElement', 'EndElement', 'Text', 'iter_events', 'iterparse_events']


class StartElement(NamedTuple):
    """The start of an element, with its name and its attributes."""
    name: QualifiedName
    attributes: Mapping[QualifiedName, str] = {}


class EndElement(NamedTuple):
    """The end of an element."""
    name: QualifiedName


class Text(NamedTuple):
    """A chunk of character data."""
    value: str


def _get_prefix(uri: str, namespaces: Optional[Mapping[str, str]]) -> str:
    if not uri or not namespaces:
        return ''
    for prefix, namespace in namespaces.items():
        if namespace == uri:
            return prefix or ''
    return ''


def _get_attributes(elem: ElementType, namespaces: Optional[Mapping[str, str]]) \
        -> dict[QualifiedName, str]:
    attributes = {}
    for name, value in elem.attrib.items():
        uri = get_namespace(name)
        attributes[QualifiedName.from_extended(name, _get_prefix(uri, namespaces))] = value
    return attributes


def iter_events(root: Union[ElementType, ElementTree.ElementTree],
                namespaces: Optional[NsmapType] = None) -> Iterator[EventType]:
    """
    Walks an ElementTree structure yielding the node stream in document order.
    Comments and processing instructions are skipped.

    :param root: an Element or an ElementTree instance. lxml elements are accepted.
    :param namespaces: an optional map from prefixes to namespace URIs, used for \
    restoring the prefixes of names. For lxml elements the *nsmap* of the element \
    is used.
    """
    if hasattr(root, 'getroot') and not hasattr(root, 'tag'):
        root = root.getroot()
    if not hasattr(root, 'tag') or not hasattr(root, 'attrib'):
        msg = _("invalid type {!r}, must be an Element or an ElementTree")
        raise XMLRecordsTypeError(msg.format(type(root)))

    def walk(elem: ElementType) -> Iterator[EventType]:
        nsmap = getattr(elem, 'nsmap', None) or namespaces
        prefix = getattr(elem, 'prefix', None)
        if prefix is None:
            prefix = _get_prefix(get_namespace(elem.tag), nsmap)

        name = QualifiedName.from_extended(elem.tag, prefix)
        yield StartElement(name, _get_attributes(elem, nsmap))
        if elem.text:
            yield Text(elem.text)

        for child in elem:
            if callable(child.tag):
                pass  # a comment or a processing instruction
            else:
                yield from walk(child)
            if child.tail:
                yield Text(child.tail)

        yield EndElement(name)

    yield from walk(root)


def iterparse_events(source: Union[str, Path, IO[str], IO[bytes]]) -> Iterator[EventType]:
    """
    Parses a source incrementally with ElementTree's iterparse, yielding the node
    stream in document order. Processed elements are cleared for saving memory.

    :param source: a file path or a file-like object.
    """
    stack: list[list[Any]] = []
    nsmaps: list[dict[str, str]] = [{}]
    pending: dict[str, str] = {}

    for event, data in ElementTree.iterparse(source, events=('start-ns', 'start', 'end')):
        if event == 'start-ns':
            prefix, uri = data
            pending[prefix] = uri
            continue

        elem = data
        if event == 'start':
            nsmap = nsmaps[-1]
            if pending:
                nsmap = {**nsmap, **pending}
                pending = {}
            nsmaps.append(nsmap)

            if stack:
                parent, last_child = stack[-1]
                if last_child is None:
                    text = parent.text
                else:
                    text = last_child.tail
                    last_child.clear()
                if text:
                    yield Text(text)

            name = QualifiedName.from_extended(
                elem.tag, _get_prefix(get_namespace(elem.tag), nsmap)
            )
            stack.append([elem, None])
            yield StartElement(name, _get_attributes(elem, nsmap))
        else:
            nsmap = nsmaps.pop()
            _elem, last_child = stack.pop()
            if last_child is None:
                text = elem.text
            else:
                text = last_child.tail
                last_child.clear()
            if text:
                yield Text(text)

            yield EndElement(QualifiedName.from_extended(
                elem.tag, _get_prefix(get_namespace(elem.tag), nsmap)
            ))
            if stack:
                stack[-1][1] = elem
            else:
                elem.clear()
