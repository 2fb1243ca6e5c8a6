# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Binary prefix arithmetic for quota values.

Values are kept as ScaledValue(magnitude, unit) with unit one of UNITS.
Rendering always uses a dot as decimal separator: str.format does not
consult the locale, which log scrapers reading our output rely on.
"""

import re

from hpcquota.errors import ParseError
from hpcquota.record import ScaledValue

UNITS = ["", "k", "M", "G", "T", "P"]
BASE = 1 << 10

# integer digits shown before promoting to the next unit
MAX_DIGITS = 5

# 1,234.5k | 356.4M | 7159
SCALED_RE = re.compile(r"^([0-9]{1,3}(?:,[0-9]{3})+|[0-9]+)(\.[0-9]+)?"
                       r"([kKMGTP]?)$")

def rank(unit):
    """position of unit in UNITS, bytes/plain counts being 0"""
    try:
        return UNITS.index(unit)
    except ValueError:
        raise ValueError("unknown unit: {0!r}".format(unit)) from None

def parse_scaled(text):
    """Parse '1,234.5M' like text into a ScaledValue.  quota -s prints
       kibibytes as 'K', which is read as 'k'."""
    m = SCALED_RE.match(text.strip())
    if m is None:
        raise ParseError("not a scaled value: {0!r}".format(text))
    number = m.group(1).replace(",", "")
    if m.group(2):
        magnitude = float(number + m.group(2))
    else:
        magnitude = int(number)
    return ScaledValue(magnitude, m.group(3).replace("K", "k"))

def format_scaled(value, precision = 1):
    """Render value with precision decimals followed by its unit letter.
       The value is promoted to the next unit while its integer part has
       more than MAX_DIGITS digits."""
    magnitude, unit = value
    r = rank(unit)
    while magnitude and r < len(UNITS) - 1 and \
          round(magnitude, precision) >= 10 ** MAX_DIGITS:
        magnitude = 1.0 * magnitude / BASE
        r += 1
    return "{0:.{1}f}{2}".format(magnitude, precision, UNITS[r])

def convert_to_unit(value, unit):
    """rescale value to unit, e.g. 2048G -> 2.0T"""
    shift = rank(value.unit) - rank(unit)
    return ScaledValue(value.magnitude * BASE ** shift, unit)

def to_bytes(value):
    """absolute magnitude of value, for comparing limits"""
    return value.magnitude * BASE ** rank(value.unit)
