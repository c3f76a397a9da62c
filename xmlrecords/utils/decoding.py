#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from decimal import Decimal
from typing import Any, Optional


def raw_encode_value(value: Any) -> Optional[str]:
    """Encodes a simple value to XML."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, float):
        if value != value:
            return 'NaN'
        elif value in (float('inf'), float('-inf')):
            return 'INF' if value > 0 else '-INF'
        return str(value)
    elif isinstance(value, Decimal):
        return format(value, 'f')
    elif isinstance(value, (list, tuple)):
        return ' '.join(raw_encode_value(e) or '' for e in value)
    elif isinstance(value, bytes):
        return value.decode()
    else:
        return str(value) if value is not None else None

