# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
BeeGFS quota as printed by:

    beegfs-ctl --getquota --csv --mount=<path> --gid <group>

name,id,size,hard,files,hard
umcg-depad,55100128,165144313856,unlimited,1346,unlimited

BeeGFS has no soft limits and no grace, both are reported as UNKNOWN so
"not supported" stays distinguishable from "not exceeded".
"""

import logging

from hpcquota.errors import ParseError
from hpcquota.fields import scaled_field, split_lines
from hpcquota.record import Pair, QuotaRecord, UNKNOWN, entity_kind
from hpcquota.status import resolve

log = logging.getLogger(__name__)

FIELDS = 6

# (facepalm) hard is listed twice
KEYS = ["name", "id", "size", "size_hard", "files", "files_hard"]

def parse_line(entity, line, context):
    """Parse one CSV line into a QuotaRecord"""
    values = [v.strip() for v in line.split(",")]
    if len(values) != FIELDS:
        raise ParseError("expected {0} beegfs-ctl fields, got {1}: {2!r}"
                         .format(FIELDS, len(values), line))

    # quota dictionary
    qd = dict(zip(KEYS, values))

    return resolve(QuotaRecord(entity_kind(entity, context),
                               context.path or qd["name"],
                               Pair(scaled_field(qd["size"]),
                                    UNKNOWN,
                                    scaled_field(qd["size_hard"]),
                                    UNKNOWN,
                                    False),
                               Pair(scaled_field(qd["files"]),
                                    UNKNOWN,
                                    scaled_field(qd["files_hard"]),
                                    UNKNOWN,
                                    False),
                               None))

def parse(entity, raw_output, context):
    """yield a QuotaRecord per data line in raw_output, the header line
       is skipped"""
    for line in split_lines(raw_output):
        if line.startswith("name,"):
            continue
        try:
            yield parse_line(entity, line, context)
        except ParseError as e:
            log.debug("skipping beegfs-ctl line for %s: %s", entity, e)
