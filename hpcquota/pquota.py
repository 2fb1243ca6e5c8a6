# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Plain Linux quota tools output, one line per file system as printed by:

    quota -sQwA -u --show-mntpoint --hide-device

Disk quotas for user alice (uid 50100123):
     Filesystem   space   quota   limit   grace   files   quota   limit   grace
          /home    356M*   300M    400M   6days    7159       0       0
          /apps   1024K       0       0             12       0       0

Grace columns are only printed when the soft limit was exceeded, which
quota marks with a '*' on the used value.
"""

import logging

from hpcquota.errors import ParseError
from hpcquota.fields import OVER_MARKER, split_lines, text_pair
from hpcquota.record import QuotaRecord, entity_kind
from hpcquota.status import resolve

log = logging.getLogger(__name__)

# Filesystem space quota limit grace files quota limit grace
FIELDS = 9

HEADERS = ("Disk quotas for", "Filesystem")

def parse_line(entity, line, context):
    """Parse a single quota report line into a QuotaRecord"""
    values = line.split()
    if len(values) < FIELDS - 2:
        raise ParseError("short quota line: {0!r}".format(line))
    # Insert 'none' for grace values not reported to prevent shifting.
    if OVER_MARKER not in values[1]:
        values.insert(4, "none")
    if OVER_MARKER not in values[5]:
        values.append("none")
    if len(values) != FIELDS:
        raise ParseError("expected {0} quota fields, got {1}: {2!r}"
                         .format(FIELDS, len(values), line))

    return resolve(QuotaRecord(entity_kind(entity, context),
                               values[0],
                               text_pair(*values[1:5]),
                               text_pair(*values[5:9]),
                               None))

def parse(entity, raw_output, context):
    """yield a QuotaRecord for each file system line in raw_output,
       duplicate lines are reported once"""
    seen = set()
    for line in split_lines(raw_output):
        if line.startswith(HEADERS) or line in seen:
            continue
        seen.add(line)
        try:
            yield parse_line(entity, line, context)
        except ParseError as e:
            log.debug("skipping quota line for %s: %s", entity, e)
