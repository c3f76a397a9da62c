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
This module contains namespace definitions and reserved names used by converters.
"""

###
# Namespace URIs
XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'
"URI of the XML namespace (xml)"

XMLNS_NAMESPACE = 'http://www.w3.org/2000/xmlns/'
"URI of the XML namespace declarations (xmlns)"

XSI_NAMESPACE = 'http://www.w3.org/2001/XMLSchema-instance'
"URI of the XML Schema Instance namespace (xsi)"

NS_NOT_DECLARED = '$$namespace-not-declared$$'
"""
Sentinel URI of a qualified name derived from a schema field without a namespace
annotation. It's distinct from the empty string, that means explicitly no namespace.
"""

###
# Reserved keys of document-shaped data
XMLNS = 'xmlns'
"Name of namespace declaration attributes"

DEFAULT_ATTR_PREFIX = 'attribute_'
"Default prefix of attribute keys in document-shaped data"

DEFAULT_CONTENT_KEY = '#content'
"Default key for the character content of an element with attributes"

###
# Primitive kinds
STRING_KIND = 'string'
INT_KIND = 'int'
FLOAT_KIND = 'float'
DECIMAL_KIND = 'decimal'
BOOLEAN_KIND = 'boolean'
DATE_KIND = 'date'
DATETIME_KIND = 'dateTime'
TIME_KIND = 'time'
DURATION_KIND = 'duration'
ANY_KIND = 'any'

PRIMITIVE_KINDS = frozenset((
    STRING_KIND, INT_KIND, FLOAT_KIND, DECIMAL_KIND, BOOLEAN_KIND,
    DATE_KIND, DATETIME_KIND, TIME_KIND, DURATION_KIND, ANY_KIND
))

UNBOUNDED = -1
"Size of an array without a fixed length"
