#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Translation of conversion error messages."""
import gettext as _gettext
from collections.abc import Iterable
from pathlib import Path
from typing import cast, Any, Optional, Union

__all__ = ['activate', 'deactivate', 'is_active', 'gettext']

LOCALE_DIR = Path(__file__).parent.joinpath('locale')
DOMAIN = 'xmlrecords'

_translation: Any = None


def activate(localedir: Union[None, str, Path] = None,
             languages: Optional[Iterable[str]] = None,
             fallback: bool = True) -> None:
    """
    Activate the translation of conversion error messages. Translations are
    looked up in the domain *xmlrecords*.

    :param localedir: a string or Path-like object to locale directory, for \
    default is the *locale* directory of the package.
    :param languages: list of language codes.
    :param fallback: if `True`, the default, messages are not translated \
    when a catalog is not found, otherwise an `OSError` is raised.
    """
    global _translation

    _translation = _gettext.translation(
        domain=DOMAIN,
        localedir=localedir if localedir is not None else LOCALE_DIR,
        languages=languages,
        fallback=fallback,
    )


def deactivate() -> None:
    """Deactivate the translation of conversion error messages."""
    global _translation
    _translation = None


def is_active() -> bool:
    return _translation is not None


def gettext(message: str) -> str:
    if _translation is None:
        return message
    return cast(str, _translation.gettext(message))
