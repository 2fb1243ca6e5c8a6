# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
NFS4/Isilon directory quota.  There is no quota tool on the client, an
Isilon directory quota shows up as the size of the exported directory:

    df --block-size=1 --output=target,size,used,itotal,iused <dir>

Mounted on                         1B-blocks         Used   Inodes  IUsed
/groups/umcg-gaf/prm03         1099511627776 549755813888 10000000 123456

Only hard limits and usage are observable, soft limits and grace are
UNKNOWN.  When <dir> is not a mount of its own, df reports the enclosing
file system and the line is ignored.
"""

import logging
import os

from hpcquota.errors import ParseError
from hpcquota.fields import scaled_field, split_lines
from hpcquota.record import FILESET, Pair, QuotaRecord, UNKNOWN
from hpcquota.status import resolve

log = logging.getLogger(__name__)

# target size used itotal iused, target may contain spaces
FIELDS = 5

def parse_line(entity, line, context):
    """Parse one df line into a QuotaRecord"""
    values = line.rsplit(None, FIELDS - 1)
    if len(values) != FIELDS:
        raise ParseError("expected {0} df fields, got {1}: {2!r}"
                         .format(FIELDS, len(values), line))
    target, size, used, itotal, iused = values
    if context.path and \
       os.path.normpath(target) != os.path.normpath(context.path):
        raise ParseError("{0} is not a mount of its own, df reports {1}"
                         .format(context.path, target))

    return resolve(QuotaRecord(FILESET,
                               target,
                               Pair(scaled_field(used),
                                    UNKNOWN,
                                    scaled_field(size),
                                    UNKNOWN,
                                    False),
                               Pair(scaled_field(iused),
                                    UNKNOWN,
                                    scaled_field(itotal),
                                    UNKNOWN,
                                    False),
                               None))

def parse(entity, raw_output, context):
    """yield the QuotaRecord for the queried directory, if it is a mount"""
    for line in split_lines(raw_output):
        if line.startswith("Mounted on"):
            continue
        try:
            yield parse_line(entity, line, context)
        except ParseError as e:
            log.debug("skipping df line for %s: %s", entity, e)
