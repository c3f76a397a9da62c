#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from collections.abc import Iterator
from typing import NamedTuple, Optional

from .aliases import FieldIndexType
from .exceptions import XMLRecordsInternalError
from .indexes import build_indexes
from .translation import gettext as _
from .types import RecordType, SchemaType

__all__ = ['Scope', 'ScopeStack']


class Scope(NamedTuple):
    """A frame of the scope stack, one for each record type boundary."""
    record_type: RecordType
    element_index: FieldIndexType
    attribute_index: FieldIndexType
    rest_type: Optional[SchemaType]


class ScopeStack:
    """
    A stack of scopes that follows the nesting of record types during a
    conversion. A stack is owned by a single conversion call and it's not
    shared between calls.
    """
    __slots__ = ('_frames',)

    def __init__(self) -> None:
        self._frames: list[Scope] = []

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, [s.record_type.name for s in self._frames])

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Scope]:
        return reversed(self._frames)

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, record_type: RecordType) -> Scope:
        """
        Builds a new scope for a record type and puts it on top of the stack.
        The attribute index of the current scope, if any, is used for excluding
        shadowed elements.
        """
        enclosing = self._frames[-1].attribute_index if self._frames else None
        element_index, attribute_index = build_indexes(record_type, enclosing)
        scope = Scope(record_type, element_index, attribute_index, record_type.rest_type)
        self._frames.append(scope)
        return scope

    def pop(self) -> Scope:
        try:
            return self._frames.pop()
        except IndexError:
            raise XMLRecordsInternalError(_("can't pop from an empty scope stack")) from None

    def current(self) -> Scope:
        try:
            return self._frames[-1]
        except IndexError:
            raise XMLRecordsInternalError(_("the scope stack is empty")) from None
