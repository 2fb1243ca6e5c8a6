# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Lustre group quota as printed by "lfs quota -q -h -g <group> <path>".
Without -q the output looks like:

Disk quotas for group umcg-gaf (gid 55100132):
     Filesystem    used   quota   limit   grace   files   quota   limit   grace
/groups/umcg-gaf/tmp04
                 23.09T*    15T     20T       -  334110       0       0       -

lfs wraps long file system names onto their own line, so the output is
joined before it is split into fields.
"""

import logging
import re

from colors import color

from hpcquota.errors import ParseError
from hpcquota.fields import split_lines, text_pair
from hpcquota.record import QuotaRecord, PRIVATE_GROUP, USER, entity_kind
from hpcquota.status import resolve

log = logging.getLogger(__name__)

# Filesystem used quota limit grace files quota limit grace
FIELDS = 9

HEADERS = ("Disk quotas for", "Filesystem")

# sub-groups share the folder of their main group: umcg-gonl-rar1
SUBGROUP_RE = re.compile(r"([a-z]*-[a-z]*)(-rar[0-9]*)$")

def split_subgroup(group):
    """return (main group, sub-group suffix) or (group, None)"""
    m = SUBGROUP_RE.search(group)
    if m is None:
        return group, None
    return m.group(1), m.group(2)

def report_label(group, kind, path, context):
    """Path shown for group's quota on path.  Private groups get their
       home folder, sub-groups their main group folder with the sub-group
       suffix in reverse video."""
    path = path.rstrip("/") or "/"
    if kind in (PRIVATE_GROUP, USER) and path.endswith("/home"):
        return "{0}/{1}".format(path, group)

    main, sub = split_subgroup(group)
    marker = "/groups/{0}".format(main)
    head, found, tail = path.partition(marker)
    if sub is None or not found or tail[:1] not in ("", "/"):
        return path
    if not context.plain_text:
        sub = color(sub, style = "negative")
    return head + marker + sub + tail

def parse_line(entity, line, context):
    """Parse joined lfs quota output into a QuotaRecord"""
    values = line.split()
    if len(values) != FIELDS:
        raise ParseError("expected {0} lfs quota fields, got {1}: {2!r}"
                         .format(FIELDS, len(values), line))

    kind = entity_kind(entity, context)
    return resolve(QuotaRecord(kind,
                               report_label(entity, kind,
                                            context.path or values[0],
                                            context),
                               text_pair(*values[1:5]),
                               text_pair(*values[5:9]),
                               None))

def parse(entity, raw_output, context):
    """yield the QuotaRecord in raw_output, if any"""
    body = " ".join(l for l in split_lines(raw_output)
                    if not l.startswith(HEADERS))
    if not body:
        return
    try:
        yield parse_line(entity, body, context)
    except ParseError as e:
        log.debug("skipping lfs quota for %s on %s: %s",
                  entity, context.path, e)
