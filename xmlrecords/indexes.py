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
This module contains the builder of the name indexes of record types.
An index maps the effective qualified names of markup nodes to the
descriptors of the record fields.
"""
from collections.abc import Mapping
from typing import Optional

from .aliases import FieldIndexType
from .caching import ComputeOnceCache
from .exceptions import XMLRecordsSchemaConflict, XMLRecordsTypeError
from .qnames import QualifiedName
from .translation import gettext as _
from .types import FieldDescriptor, RecordType
from .utils.logger import logger

__all__ = ['get_field_name', 'build_indexes', 'index_cache']


def get_field_name(field: FieldDescriptor) -> QualifiedName:
    """
    Returns the effective qualified name of a record field. The elements of an
    array of records are named after the item record type, if it's renamed.
    """
    return QualifiedName.from_annotation(field.element_annotation, field.name)


def _build_unshadowed_indexes(record_type: RecordType) \
        -> tuple[FieldIndexType, FieldIndexType]:
    elements: FieldIndexType = {}
    attributes: FieldIndexType = {}

    for field in record_type.fields.values():
        qname = get_field_name(field)
        index = attributes if field.is_attribute else elements
        try:
            other = index[qname]
        except KeyError:
            index[qname] = field
        else:
            if other is not field:
                raise XMLRecordsSchemaConflict(qname.local_name, record_type.name)

    return elements, attributes


index_cache: ComputeOnceCache[RecordType, tuple[FieldIndexType, FieldIndexType]] = \
    ComputeOnceCache(_build_unshadowed_indexes)
"""The cache of record type indexes, keyed by record type identity."""


def build_indexes(record_type: RecordType,
                  enclosing_attributes: Optional[Mapping[QualifiedName, FieldDescriptor]] = None) \
        -> tuple[FieldIndexType, FieldIndexType]:
    """
    Builds the element index and the attribute index of a record type.

    Fields annotated as attributes are put only in the attribute index. Element
    fields whose effective name is an attribute name of the enclosing scope are
    excluded from the element index, because attributes shadow elements with the
    same name.

    :param record_type: the record type.
    :param enclosing_attributes: the attribute index of the enclosing scope.
    :return: a couple of new dictionaries, the element index and the attribute index.
    :raises XMLRecordsSchemaConflict: if two distinct fields have the same \
    effective qualified name.
    """
    if not isinstance(record_type, RecordType):
        msg = _("invalid type {!r} for an index source, must be a RecordType")
        raise XMLRecordsTypeError(msg.format(type(record_type)))

    elements, attributes = index_cache(record_type)
    if not enclosing_attributes:
        return dict(elements), dict(attributes)

    element_index = {}
    for qname, field in elements.items():
        if qname in enclosing_attributes:
            logger.debug("field %r of %r is shadowed by an enclosing attribute",
                         field.name, record_type.name)
        else:
            element_index[qname] = field

    return element_index, dict(attributes)
