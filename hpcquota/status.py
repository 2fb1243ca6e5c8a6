# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Grace parsing and exceeded/ok/unknown status of quota records.

The quota tools disagree on how to show grace: '-' (lfs) and 'none'
(quota, mmlsquota) both mean the timer was not started, remaining time
is '6days', '6d23h', '1w2d', '6 days', '23:59' or 'expired'.
"""

import re

from hpcquota.record import Grace, ScaledValue, UNKNOWN, \
                            STATUS_OK, STATUS_EXCEEDED, STATUS_UNKNOWN
from hpcquota.units import to_bytes

NO_GRACE = ("", "-", "none")

# week and day counts in grace text, hours and minutes count as 0 days
GRACE_RE = re.compile(r"([0-9]+)\s*(w|d)")

# Workaround for a quota tools defect: an expired grace timer wraps
# around to 49697days and counts down from there.  Revisit when the
# quota tools are fixed.
WRAPPED_GRACE_RE = re.compile(r"[0-9]{5}days")

def grace_text(text):
    """'5days' -> '5 days'"""
    return re.sub(r"(?<=[0-9])day", " day", text, count = 1)

def grace_days(text):
    """whole days left in grace text"""
    days = 0
    for count, unit in GRACE_RE.findall(text):
        days += int(count) * (7 if unit == "w" else 1)
    return days

def fix_grace(grace):
    """rewrite the wrapped 5 digit day count to 0 days"""
    if isinstance(grace, Grace) and \
       WRAPPED_GRACE_RE.search(grace.text.replace(" ", "")):
        return Grace(0, "0 days")
    return grace

def parse_grace(text):
    """Return None for no grace, UNKNOWN or a Grace for text"""
    text = text.strip()
    if text in NO_GRACE:
        return None
    if text == UNKNOWN:
        return UNKNOWN
    return fix_grace(Grace(grace_days(text), grace_text(text)))

def hard_reached(pair):
    """used has reached a set (non-zero) hard limit"""
    if not isinstance(pair.used, ScaledValue) or \
       not isinstance(pair.hard, ScaledValue):
        return False
    limit = to_bytes(pair.hard)
    return limit > 0 and to_bytes(pair.used) >= limit

def pair_status(pair):
    """status of a single space or files pair"""
    if pair.over or hard_reached(pair) or isinstance(pair.grace, Grace):
        return STATUS_EXCEEDED
    if pair.soft == UNKNOWN or pair.grace == UNKNOWN:
        return STATUS_UNKNOWN
    return STATUS_OK

def combine(*statuses):
    """Exceeded wins over Unknown, which wins over Ok"""
    if STATUS_EXCEEDED in statuses:
        return STATUS_EXCEEDED
    if STATUS_UNKNOWN in statuses:
        return STATUS_UNKNOWN
    return STATUS_OK

def resolve(record):
    """return record with fixed grace values and its status set"""
    space = record.space._replace(grace = fix_grace(record.space.grace))
    files = record.files._replace(grace = fix_grace(record.files.grace))
    return record._replace(space = space, files = files,
                           status = combine(pair_status(space),
                                            pair_status(files)))
