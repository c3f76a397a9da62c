#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Qualified names and helper functions for QNames and namespaces."""
from collections.abc import Mapping
from typing import Any, Optional, TYPE_CHECKING, TypeVar

from .exceptions import XMLRecordsTypeError, XMLRecordsValueError
from .names import NS_NOT_DECLARED
from .translation import gettext as _

if TYPE_CHECKING:
    from .types import NameNamespaceAnnotation  # noqa: F401

__all__ = ['QualifiedName', 'get_namespace', 'get_qname', 'local_name',
           'split_prefixed_name', 'get_prefixed_name', 'lookup_name']


class QualifiedName:
    """
    An immutable markup name, composed by a namespace URI, a local name and
    a prefix. The prefix is presentational: equality and hashing consider only
    the namespace URI and the local name.

    :param namespace: the namespace URI. The empty string means no namespace, \
    the sentinel `NS_NOT_DECLARED` means that no namespace annotation is present.
    :param local_name: the local part of the name.
    :param prefix: the optional prefix.
    """
    __slots__ = ('namespace', 'local_name', 'prefix')

    namespace: str
    local_name: str
    prefix: str

    def __init__(self, namespace: Optional[str], local_name: str, prefix: Optional[str] = '') -> None:
        if not isinstance(local_name, str):
            msg = _("invalid type {!r} for local name, must be a string")
            raise XMLRecordsTypeError(msg.format(type(local_name)))

        object.__setattr__(self, 'namespace', namespace or '')
        object.__setattr__(self, 'local_name', local_name)
        object.__setattr__(self, 'prefix', prefix or '')

    def __setattr__(self, name: str, value: Any) -> None:
        raise XMLRecordsValueError(_("can't change attribute {!r} of a qualified name").format(name))

    def __delattr__(self, name: str) -> None:
        raise XMLRecordsValueError(_("can't delete attribute {!r} of a qualified name").format(name))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QualifiedName):
            return NotImplemented
        return self.local_name == other.local_name and self.namespace == other.namespace

    def __hash__(self) -> int:
        return hash((self.namespace, self.local_name))

    def __repr__(self) -> str:
        if self.prefix:
            return '%s(%r, %r, %r)' % (
                self.__class__.__name__, self.namespace, self.local_name, self.prefix
            )
        return '%s(%r, %r)' % (self.__class__.__name__, self.namespace, self.local_name)

    def __str__(self) -> str:
        if self.namespace and self.namespace != NS_NOT_DECLARED:
            return f'{{{self.namespace}}}{self.local_name}'
        return self.local_name

    @classmethod
    def from_extended(cls, name: str, prefix: Optional[str] = '') -> 'QualifiedName':
        """Creates a qualified name from an ElementTree name in extended format."""
        return cls(get_namespace(name), local_name(name), prefix)

    @classmethod
    def from_annotation(cls, annotation: Optional['NameNamespaceAnnotation'],
                        name: str) -> 'QualifiedName':
        """
        Creates the effective qualified name of a schema field or record from
        its annotation. The local name is the renamed name if provided, otherwise
        is the *name* argument. Without a namespace annotation the namespace is
        the `NS_NOT_DECLARED` sentinel.
        """
        if annotation is None:
            return cls(NS_NOT_DECLARED, name)

        if annotation.name:
            name = annotation.name
        if annotation.namespace is None:
            return cls(NS_NOT_DECLARED, name)
        return cls(annotation.namespace, name, annotation.prefix)

    @property
    def is_annotated(self) -> bool:
        """`True` if the name has a declared namespace, also if it's the empty one."""
        return self.namespace != NS_NOT_DECLARED

    def with_local_name(self, local_name: str) -> 'QualifiedName':
        """Returns a new qualified name with a different local name."""
        return self.__class__(self.namespace, local_name, self.prefix)

    @property
    def prefixed_name(self) -> str:
        return f'{self.prefix}:{self.local_name}' if self.prefix else self.local_name


###
# Helper functions for names in string format

def get_namespace(qname: str) -> str:
    """
    Returns the namespace URI associated with a QName in extended form or a local name.
    If the argument is not conformant to QName format returns the empty string, which
    means no namespace.
    """
    try:
        if qname[0] != '{':
            return ''
        namespace, _name = qname[1:].split('}')
    except (IndexError, ValueError):
        return ''
    except TypeError:
        raise XMLRecordsTypeError(_("the argument must be a string-like object"))
    else:
        return namespace


def get_qname(uri: Optional[str], name: str) -> str:
    """
    Returns an expanded QName from URI and local part. If any argument has boolean value
    `False` or if the name is already an expanded QName, returns the *name* argument.

    :param uri: namespace URI
    :param name: local or qualified name
    :return: string or the name argument
    """
    try:
        if name[0] == '{' or not uri or uri == NS_NOT_DECLARED:
            return name
    except IndexError:
        return ''
    except TypeError:
        raise XMLRecordsTypeError(_("the 2nd argument must be a string-like object"))
    else:
        return f'{{{uri}}}{name}'


def local_name(qname: str) -> str:
    """
    Return the local part of an expanded QName or a prefixed name. If the name
    is empty returns the *name* argument.

    :param qname: an expanded QName or a prefixed name or a local name.
    """
    try:
        if qname[0] == '{':
            _namespace, qname = qname.split('}')
        elif ':' in qname:
            _prefix, qname = qname.split(':')
    except IndexError:
        return ''
    except ValueError:
        raise XMLRecordsValueError(
            _("the argument 'qname' has an invalid value {!r}").format(qname)
        )
    except TypeError:
        raise XMLRecordsTypeError(_("the argument 'qname' must be a string-like object"))
    else:
        return qname


def split_prefixed_name(name: str) -> tuple[str, str]:
    """Splits a prefixed name into a couple (prefix, local name)."""
    prefix, sep, name_ = name.partition(':')
    if not sep:
        return '', name
    return prefix, name_


def get_prefixed_name(prefix: Optional[str], name: str) -> str:
    """Returns a name prefixed with *prefix*, or the name if the prefix is empty."""
    return f'{prefix}:{name}' if prefix else name


T = TypeVar('T')


def lookup_name(index: Mapping[QualifiedName, T], qname: QualifiedName) -> Optional[T]:
    """
    Lookups a qualified name of a markup node in an index of schema fields. An exact
    match is tried first, then the match with a field that has no namespace annotation
    and the same local name.
    """
    try:
        return index[qname]
    except KeyError:
        if qname.namespace == NS_NOT_DECLARED:
            return None
        return index.get(QualifiedName(NS_NOT_DECLARED, qname.local_name))
