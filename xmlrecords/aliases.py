#
# Copyright (c), 2021, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Type aliases for static typing analysis.
"""
from decimal import Decimal
from pathlib import Path
from collections.abc import Iterable, MutableMapping
from typing import Any, IO, Optional, TYPE_CHECKING, Union
from xml.etree.ElementTree import Element, ElementTree

from elementpath.datatypes import AbstractDateTime, Duration

__all__ = ['ElementType', 'ElementTreeType', 'SourceType', 'XMLSourceType',
           'NsmapType', 'XmlnsType', 'AtomicValueType', 'StructuredValueType',
           'DocumentType', 'EventType', 'EventStreamType', 'SchemaSourceType',
           'FieldIndexType']

if TYPE_CHECKING:
    from xmlrecords.events import StartElement, EndElement, Text  # noqa: F401
    from xmlrecords.qnames import QualifiedName  # noqa: F401
    from xmlrecords.types import SchemaType, FieldDescriptor  # noqa: F401

##
# Type aliases for ElementTree
ElementType = Element
ElementTreeType = ElementTree

##
# Type aliases for XML sources
SourceType = Union[str, bytes, Path, IO[str], IO[bytes]]
XMLSourceType = Union[SourceType, Element, ElementTree]

##
# Type aliases for namespaces
NsmapType = MutableMapping[str, str]
XmlnsType = Optional[list[tuple[str, str]]]

##
# Type aliases for converted data
AtomicValueType = Union[str, int, float, Decimal, bool, AbstractDateTime, Duration]
StructuredValueType = Union[None, AtomicValueType, list[Any], dict[str, Any]]
DocumentType = dict[str, Any]

##
# Type aliases for node streams and schemas
EventType = Union['StartElement', 'EndElement', 'Text']
EventStreamType = Iterable[EventType]
SchemaSourceType = Union['SchemaType', type]
FieldIndexType = dict['QualifiedName', 'FieldDescriptor']
