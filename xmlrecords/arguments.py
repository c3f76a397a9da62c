#
# Copyright (c), 2016-2025, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import logging
from collections.abc import Callable, Iterable
from functools import partial
from typing import Any, cast, Generic, Optional, TypeVar, Union

from xmlrecords.exceptions import XMLRecordsTypeError, XMLRecordsValueError, \
    XMLRecordsAttributeError
from xmlrecords.translation import gettext as _

UNKNOWN_MEMBERS_MODES = frozenset(('ignore', 'error'))
LOG_LEVELS = frozenset(('DEBUG', 'INFO', 'WARN', 'WARNING', 'ERROR', 'CRITICAL'))

T = TypeVar('T')


class Argument(Generic[T]):
    """
    A descriptor for positional and optional arguments. An argument can't be changed
    nor deleted. Arguments are validated with a sequence of validation functions that
    are called by the base *validated_value* method.
    """
    __slots__ = ('_name', '_default')

    _default: T
    _validators: tuple[Callable[['Argument[T]', T], None], ...] = ()

    def __set_name__(self, owner: type[Any], name: str) -> None:
        self._name = f'_{name}'

    def __str__(self) -> str:
        if hasattr(self, '_default'):
            return _('optional argument {!r}').format(self._name[1:])
        return _('argument {!r}').format(self._name[1:])

    def __get__(self, instance: Optional[Any], owner: type[Any]) -> T:
        try:
            return cast(T, getattr(instance, self._name))
        except AttributeError:
            try:
                return self._default
            except AttributeError:
                if instance is None:
                    msg = _("{} can't be accessed from {!r}").format(self, owner)
                else:
                    msg = _("{} of {!r} object has not been set").format(self, instance)
                raise XMLRecordsAttributeError(msg) from None

    def __set__(self, instance: Any, value: Any) -> None:
        if hasattr(instance, self._name):
            raise XMLRecordsAttributeError(_("can't change {}").format(self))
        setattr(instance, self._name, self.validated_value(value))

    def __delete__(self, instance: Any) -> None:
        raise XMLRecordsAttributeError(_("can't delete {}").format(self))

    def validated_value(self, value: Any) -> T:
        for validator in self._validators:
            validator(self, value)
        return cast(T, value)


class Option(Argument[T]):
    """
    A descriptor for handling optional arguments.

    :param default: The default value for the optional argument.
    """
    def __init__(self, *, default: T) -> None:
        self._default = default


###
# Validation helpers for arguments and options

def validate_type(attr: Argument[T], value: T,
                  types: Union[None, type[T], tuple[type[T], ...]] = None,
                  none: bool = False) -> None:
    """
    Base function for validating an argument type.

    :param attr: the argument to validate.
    :param value: the argument value to validate.
    :param types: the optional types to validate against.
    :param none: if `True` a None value is accepted.
    """
    if none and value is None or types is not None and isinstance(value, types):
        return None
    elif types is None:
        if none:
            msg = _("invalid type {!r} for {}, must be None")
            raise XMLRecordsTypeError(msg.format(type(value), attr))
        return None
    elif none:
        msg = _("invalid type {!r} for {}, must be None or a {!r}")
    else:
        msg = _("invalid type {!r} for {}, must be a {!r}")

    raise XMLRecordsTypeError(msg.format(type(value), attr, types))


def validate_choice(attr: Argument[T], value: T, choices: Iterable[T]) -> None:
    if value not in choices:
        msg = _("invalid value {!r} for {}: must be one of {}")
        raise XMLRecordsValueError(msg.format(value, attr, tuple(sorted(choices))))


def validate_not_empty(attr: Argument[str], value: str) -> None:
    if not value:
        raise XMLRecordsValueError(_("{} can't be an empty string").format(attr))


bool_validator = partial(validate_type, types=bool)
str_validator = partial(validate_type, types=str)


class BooleanOption(Option[bool]):
    _validators = (bool_validator,)


class KeyOption(Option[str]):
    """A reserved key or prefix for document-shaped data."""
    _validators = (str_validator, validate_not_empty)


class UnknownMembersOption(Option[str]):
    """The policy for document members that don't match any schema field."""
    _validators = (
        str_validator,
        partial(validate_choice, choices=UNKNOWN_MEMBERS_MODES),
    )


class LogLevelOption(Option[Union[None, str, int]]):
    def validated_value(self, value: Any) -> Union[None, str, int]:
        if value is None or isinstance(value, int) and not isinstance(value, bool):
            return cast(Optional[int], value)
        elif isinstance(value, str):
            if value.strip().upper() not in LOG_LEVELS:
                msg = _("{!r} is not a valid loglevel")
                raise XMLRecordsValueError(msg.format(value))
            return cast(int, getattr(logging, value.strip().upper()))

        msg = _("invalid type {!r} for {}, must be None, a string or an int")
        raise XMLRecordsTypeError(msg.format(type(value), self))
