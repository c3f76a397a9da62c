#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from elementpath.etree import etree_tostring

from . import translation
from .exceptions import XMLRecordsException, XMLRecordsTypeError, \
    XMLRecordsValueError, XMLRecordsInternalError, XMLRecordsConversionError, \
    XMLRecordsSchemaConflict, XMLRecordsMissingField, XMLRecordsMissingAttribute, \
    XMLRecordsArraySizeError, XMLRecordsTypeConversionError, XMLRecordsUnknownMember, \
    XMLRecordsNameMismatch, XMLRecordsNamespaceMismatch
from .qnames import QualifiedName
from .types import NameNamespaceAnnotation, FieldDescriptor, SchemaType, \
    PrimitiveType, ArrayType, RecordType, UnionType, MapType, TypeReference
from .reflection import FixedSize, xml_field, get_schema_type
from .indexes import build_indexes
from .scopes import Scope, ScopeStack
from .settings import ConversionSettings
from .events import StartElement, EndElement, Text, iter_events, iterparse_events
from .decoding import RecordDecoder
from .encoding import RecordEncoder
from .documents import from_xml, from_etree, to_dict, to_etree, to_xml, \
    document_to_etree, get_namespaces

__version__ = '1.0.0'
__author__ = "Davide Brunato"
__contact__ = "brunato@sissa.it"
__copyright__ = "Copyright 2016-2024, SISSA"
__license__ = "MIT"
__status__ = "Production/Stable"

__all__ = [
    'translation', 'etree_tostring', 'XMLRecordsException', 'XMLRecordsTypeError',
    'XMLRecordsValueError', 'XMLRecordsInternalError', 'XMLRecordsConversionError',
    'XMLRecordsSchemaConflict', 'XMLRecordsMissingField', 'XMLRecordsMissingAttribute',
    'XMLRecordsArraySizeError', 'XMLRecordsTypeConversionError',
    'XMLRecordsUnknownMember', 'XMLRecordsNameMismatch', 'XMLRecordsNamespaceMismatch',
    'QualifiedName', 'NameNamespaceAnnotation', 'FieldDescriptor', 'SchemaType',
    'PrimitiveType', 'ArrayType', 'RecordType', 'UnionType', 'MapType',
    'TypeReference', 'FixedSize', 'xml_field', 'get_schema_type', 'build_indexes',
    'Scope', 'ScopeStack', 'ConversionSettings', 'StartElement', 'EndElement',
    'Text', 'iter_events', 'iterparse_events', 'RecordDecoder', 'RecordEncoder',
    'from_xml', 'from_etree', 'to_dict', 'to_etree', 'to_xml', 'document_to_etree',
    'get_namespaces',
]
