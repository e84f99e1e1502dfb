from __future__ import annotations

import re
from typing import Optional


_SHORTHAND_RE = re.compile(r"^(-?[0-9]+(?:\.[0-9]+)?)([KMB]?)$")


def parse_int_shorthand(value) -> Optional[int]:
    """Parse strings like '1.2K', '3M', '4500', '500+', '-3' into an integer.

    Returns None for unparsable inputs. The sign is kept so negative counts
    reach validation instead of being silently flipped.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    s = str(value).strip().upper().replace(",", "")
    if not s:
        return None
    if s.endswith('+'):
        s = s[:-1]
    m = _SHORTHAND_RE.match(s)
    if not m:
        return None
    num = float(m.group(1))
    suf = m.group(2)
    factor = 1
    if suf == 'K':
        factor = 1000
    elif suf == 'M':
        factor = 1000000
    elif suf == 'B':
        factor = 1000000000
    return int(round(num * factor))
