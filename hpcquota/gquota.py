# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
GPFS fileset quota as printed by:

    mmlsquota -j <fileset> <device> --block-size 1G

                         Block Limits                                    |     File Limits
Filesystem type             GB      quota      limit   in_doubt    grace |    files   quota    limit in_doubt    grace  Remarks
scratch    FILESET       36517      51200      51200          1     none |  1048947       0        0      301     none target02.local

Only the last line is used.  Space is reported in whole gibibytes.
"""

import logging
import re

from hpcquota.errors import ParseError
from hpcquota.fields import split_lines, text_pair
from hpcquota.record import FILESET, QuotaRecord, ScaledValue
from hpcquota.status import resolve
from hpcquota.units import BASE, parse_scaled

log = logging.getLogger(__name__)

# column offsets
SIZE_USED     = 2
SIZE_QUOTA    = 3
SIZE_LIMIT    = 4
SIZE_GRACE    = 6
FILES_USED    = 8
FILES_QUOTA   = 9
FILES_LIMIT   = 10
FILES_GRACE   = 12

# the trailing Remarks column may be empty
FIELDS = (13, 14)

# '6 days', '2 hours' -> '6days', '2hours'
SPLIT_GRACE_RE = re.compile(r"\b([0-9]+) (days?|hours?|minutes?)\b")

def gib_to_scaled(text):
    """GiB count -> ScaledValue, in TiB above 1024 GiB.  The magnitude is
       kept exact, rounding is left to the report."""
    value = parse_scaled(text.rstrip("*"))
    if value.unit:
        return value
    if value.magnitude > BASE:
        return ScaledValue(1.0 * value.magnitude / BASE, "T")
    return ScaledValue(value.magnitude, "G")

def parse_line(entity, line, context):
    """Parse the mmlsquota body line into a QuotaRecord"""
    values = SPLIT_GRACE_RE.sub(r"\1\2", line).split()
    if len(values) not in FIELDS:
        raise ParseError("expected {0} mmlsquota fields, got {1}: {2!r}"
                         .format(FIELDS[-1], len(values), line))

    space = text_pair(values[SIZE_USED], values[SIZE_QUOTA],
                      values[SIZE_LIMIT], values[SIZE_GRACE])
    space = space._replace(used = gib_to_scaled(values[SIZE_USED]),
                           soft = gib_to_scaled(values[SIZE_QUOTA]),
                           hard = gib_to_scaled(values[SIZE_LIMIT]))
    files = text_pair(values[FILES_USED], values[FILES_QUOTA],
                      values[FILES_LIMIT], values[FILES_GRACE])

    return resolve(QuotaRecord(FILESET,
                               context.path or values[0],
                               space,
                               files,
                               None))

def parse(entity, raw_output, context):
    """yield the fileset QuotaRecord in raw_output, if any"""
    lines = split_lines(raw_output)
    if not lines:
        return
    try:
        yield parse_line(entity, lines[-1], context)
    except ParseError as e:
        log.debug("skipping mmlsquota for fileset %s: %s", entity, e)
