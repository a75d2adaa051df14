"""Parsing of color values from the [COLORS] section."""

from __future__ import annotations

import re
from typing import Optional

_HEX_RE = re.compile(r'[0-9a-fA-F]{6}')

NAMED_COLORS = {
    'black': '#000000',
    'red': '#cd0000',
    'green': '#00cd00',
    'yellow': '#cdcd00',
    'blue': '#5c5cff',
    'magenta': '#cd00cd',
    'cyan': '#00cdcd',
    'white': '#ffffff',
    'gray': '#c0c0c0',
    'grey': '#c0c0c0',
    'lightgray': '#c0c0c0',
    'lightgrey': '#c0c0c0',
    'darkgray': '#808080',
    'darkgrey': '#808080',
}


def parse_color(value: Optional[str]) -> Optional[str]:
    """
    Normalize a color name or hex string to '#rrggbb'
    :param value: a name from NAMED_COLORS (any case) or '#rgb' / '#rrggbb'
    :return: the normalized value, or None when the value is not recognized
    """
    if value is None:
        return None
    trimmed = str(value).strip().strip('"').strip("'").strip()
    if not trimmed:
        return None

    if trimmed.startswith('#'):
        return _parse_hex(trimmed[1:])

    collapsed = trimmed.replace('_', '').replace('-', '').replace(' ', '').lower()
    return NAMED_COLORS.get(collapsed)


def _parse_hex(digits: str) -> Optional[str]:
    if len(digits) == 3:
        digits = ''.join(ch * 2 for ch in digits)
    if not _HEX_RE.fullmatch(digits):
        return None
    return '#' + digits.lower()
