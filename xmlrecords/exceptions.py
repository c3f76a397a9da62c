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
This module contains the exception classes for the package.
"""
from typing import Any, Optional

from .translation import gettext as _


class XMLRecordsException(Exception):
    """Package's base exception class"""


class XMLRecordsTypeError(XMLRecordsException, TypeError):
    pass


class XMLRecordsValueError(XMLRecordsException, ValueError):
    pass


class XMLRecordsKeyError(XMLRecordsException, KeyError):
    pass


class XMLRecordsAttributeError(XMLRecordsException, AttributeError):
    pass


class XMLRecordsInternalError(XMLRecordsException, RuntimeError):
    """
    Raised when an internal contract is violated, e.g. popping or reading an
    empty scope stack or feeding an unbalanced sequence of markup events.
    """


class XMLRecordsConversionError(XMLRecordsException, ValueError):
    """
    Base class for errors of a document-to-record or record-to-document conversion.
    A conversion error aborts the conversion: no partial result is returned.

    :param message: the error message.
    :param path: an optional path of the element where the error occurred.
    """
    path: Optional[str] = None

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if path is not None:
            self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return _("{0}\n\nPath: {1}").format(self.message, self.path)


class XMLRecordsSchemaConflict(XMLRecordsConversionError):
    """Raised when two fields of a record type resolve to the same qualified name."""

    def __init__(self, name: str, record: Optional[str] = None) -> None:
        self.name = name
        self.record = record
        if record:
            message = _("duplicate field {0!r} in record type {1!r}").format(name, record)
        else:
            message = _("duplicate field {!r}").format(name)
        super().__init__(message)


class XMLRecordsMissingField(XMLRecordsConversionError):
    """Raised when a required field has not been provided by the document."""
    kind = 'field'

    def __init__(self, field: str, record: Optional[str] = None,
                 path: Optional[str] = None) -> None:
        self.field = field
        self.record = record
        if record:
            message = _("required {0} {1!r} of record type {2!r} not present "
                        "in XML").format(self.kind, field, record)
        else:
            message = _("required {0} {1!r} not present in XML").format(self.kind, field)
        super().__init__(message, path)


class XMLRecordsMissingAttribute(XMLRecordsMissingField):
    """Raised when a required attribute has not been provided by the document."""
    kind = 'attribute'


class XMLRecordsArraySizeError(XMLRecordsConversionError):
    """Raised when a fixed-size array field receives a different number of items."""

    def __init__(self, field: str, expected: int, actual: int,
                 path: Optional[str] = None) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        message = _("array size of field {0!r} is not compatible with the expected "
                    "size: expected {1}, got {2}").format(field, expected, actual)
        super().__init__(message, path)


class XMLRecordsTypeConversionError(XMLRecordsConversionError):
    """Raised when a value can't be converted to the expected type."""

    def __init__(self, value: Any, type_: Any, reason: Optional[str] = None,
                 path: Optional[str] = None) -> None:
        self.value = value
        self.type = type_
        self.reason = reason
        message = _("can't convert {0!r} to {1}").format(value, type_)
        if reason:
            message = f'{message}: {reason}'
        super().__init__(message, path)


class XMLRecordsUnknownMember(XMLRecordsConversionError):
    """Raised for unmatched elements or attributes when unknown members are not allowed."""

    def __init__(self, name: str, path: Optional[str] = None) -> None:
        self.name = name
        message = _("{!r} doesn't match any field of the expected type").format(name)
        super().__init__(message, path)


class XMLRecordsNameMismatch(XMLRecordsConversionError):
    """Raised when the root element name doesn't match the annotated record name."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        message = _("the record type name {0!r} mismatch with given "
                    "XML name {1!r}").format(expected, actual)
        super().__init__(message)


class XMLRecordsNamespaceMismatch(XMLRecordsConversionError):
    """Raised when the root element namespace doesn't match the annotated one."""

    def __init__(self, record: str, expected: str, actual: str) -> None:
        self.record = record
        self.expected = expected
        self.actual = actual
        message = _("namespace mismatched for the type {0!r}: expected {1!r}, "
                    "got {2!r}").format(record, expected, actual)
        super().__init__(message)


__all__ = ['XMLRecordsException', 'XMLRecordsTypeError', 'XMLRecordsValueError',
           'XMLRecordsKeyError', 'XMLRecordsAttributeError', 'XMLRecordsInternalError',
           'XMLRecordsConversionError', 'XMLRecordsSchemaConflict',
           'XMLRecordsMissingField', 'XMLRecordsMissingAttribute',
           'XMLRecordsArraySizeError', 'XMLRecordsTypeConversionError',
           'XMLRecordsUnknownMember', 'XMLRecordsNameMismatch',
           'XMLRecordsNamespaceMismatch']
