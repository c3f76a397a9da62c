#
# Copyright (c), 2016-2025, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Package settings for document/record conversions."""
import dataclasses as dc
from typing import Any

from xmlrecords.exceptions import XMLRecordsTypeError
from xmlrecords.names import DEFAULT_ATTR_PREFIX, DEFAULT_CONTENT_KEY, XMLNS
from xmlrecords.translation import gettext as _
from xmlrecords.arguments import BooleanOption, KeyOption, UnknownMembersOption, \
    LogLevelOption


@dc.dataclass
class ConversionSettings:
    """Settings for converting documents to records and records to documents."""

    unknown_members: UnknownMembersOption = UnknownMembersOption(default='ignore')
    """
    The policy for elements and attributes that don't match any field of the
    record type and can't be routed to a rest type. For default they are dropped
    ('ignore'), with 'error' the conversion fails.
    """

    attr_prefix: KeyOption = KeyOption(default=DEFAULT_ATTR_PREFIX)
    """The prefix of attribute keys in document-shaped data."""

    content_key: KeyOption = KeyOption(default=DEFAULT_CONTENT_KEY)
    """
    The key for the character content of an element, used when the element has
    attributes or namespace declarations. A record field with this name collects
    the text content of the record element.
    """

    strip_whitespace: BooleanOption = BooleanOption(default=True)
    """Ignore whitespace-only text between child elements of a record element."""

    check_names: BooleanOption = BooleanOption(default=True)
    """
    Check the root element name against the annotated name of the root record
    type, and the namespace of record elements against the annotated namespaces
    of their record types.
    """

    loglevel: LogLevelOption = LogLevelOption(default=None)
    """Logging level to use during the conversion, `None` keeps the current level."""

    @classmethod
    def get_settings(cls, **kwargs: Any) -> 'ConversionSettings':
        settings = kwargs.pop('settings', None)
        if settings is None:
            settings = _DEFAULT_CONVERSION_SETTINGS
        elif not isinstance(settings, ConversionSettings):
            msg = _("expected a ConversionSettings instance for 'settings', got {!r}'")
            raise XMLRecordsTypeError(msg.format(settings))

        if kwargs:
            names = {f.name for f in dc.fields(cls)}
            for name in kwargs:
                if name not in names:
                    msg = _("unexpected keyword argument {!r} for conversion settings")
                    raise XMLRecordsTypeError(msg.format(name))
            return dc.replace(settings, **kwargs)
        return settings

    @classmethod
    def update_defaults(cls, **kwargs: Any) -> None:
        global _DEFAULT_CONVERSION_SETTINGS
        _DEFAULT_CONVERSION_SETTINGS = ConversionSettings.get_settings(**kwargs)

    @classmethod
    def reset_defaults(cls) -> None:
        global _DEFAULT_CONVERSION_SETTINGS
        _DEFAULT_CONVERSION_SETTINGS = ConversionSettings()

    @property
    def xmlns_key(self) -> str:
        """The key of the default namespace declaration in document-shaped data."""
        return f'{self.attr_prefix}{XMLNS}'

    def get_xmlns_key(self, prefix: Any = None) -> str:
        """Returns the key of a namespace declaration in document-shaped data."""
        if prefix:
            return f'{self.attr_prefix}{XMLNS}:{prefix}'
        return f'{self.attr_prefix}{XMLNS}'


get_settings = ConversionSettings.get_settings

# Default package settings
_DEFAULT_CONVERSION_SETTINGS = ConversionSettings()
