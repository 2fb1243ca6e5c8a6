# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Canonical quota records shared by all backends.

A QuotaRecord holds two Pairs, one for space and one for files, in the
order of the report columns: used quota limit grace.
"""

import collections

from hpcquota.config import PRIVATE_GID_LIMIT

# QuotaRecord.kind, printed in the first report column
USER          = "U"
PRIVATE_GROUP = "P"
REGULAR_GROUP = "G"
FILESET       = "F"

# entity kind hints handed in by the dispatcher
HINT_USER     = "user"
HINT_PRIVATE  = "private"
HINT_REGULAR  = "regular"
HINT_ADMIN    = "admin"

# QuotaRecord.status
STATUS_OK       = "Ok"
STATUS_EXCEEDED = "Exceeded"
STATUS_UNKNOWN  = "Unknown"

# value a backend cannot report, used for limits and grace
UNKNOWN   = "unknown"
# hard limit reported as not set by BeeGFS
UNLIMITED = "unlimited"

# magnitude with unit in "", k, M, G, T, P
ScaledValue = collections.namedtuple("ScaledValue", ["magnitude", "unit"])

# concrete remaining grace, days rounded down; text as displayed
Grace = collections.namedtuple("Grace", ["days", "text"])

Pair = collections.namedtuple("Pair",
                              [
                                  "used",
                                  "soft",
                                  "hard",
                                  "grace",  # None, UNKNOWN or Grace
                                  "over",   # backend marked used with '*'
                              ])

QuotaRecord = collections.namedtuple("QuotaRecord",
                                     [
                                         "kind",
                                         "label",
                                         "space",
                                         "files",
                                         "status",
                                     ])

# batch wide display options, computed once per report
ReportContext = collections.namedtuple("ReportContext",
                                       [
                                           "plain_text",
                                           "normalize",
                                           "label_width",
                                       ])

# per (entity, mount) parse options
ParseContext = collections.namedtuple("ParseContext",
                                      [
                                          "plain_text",
                                          "user",
                                          "hint",
                                          "path",
                                          "gid",
                                          "private_gid_limit",
                                      ])

def parse_context(user, hint = HINT_USER, path = None, gid = None,
                  report = None, private_gid_limit = PRIVATE_GID_LIMIT):
    """build a ParseContext for one query, inheriting display options from
       the batch ReportContext"""
    if report is None:
        report = ReportContext(False, False, 0)
    return ParseContext(report.plain_text, user, hint, path, gid,
                        private_gid_limit)

def classify_group(group, gid, user, limit = PRIVATE_GID_LIMIT):
    """Private groups are the invoking user's own group or groups with a
       GID below limit, all others are regular groups"""
    if group == user:
        return PRIVATE_GROUP
    if gid is not None and gid < limit:
        return PRIVATE_GROUP
    return REGULAR_GROUP

def entity_kind(entity, context):
    """record kind for entity based on the dispatcher's hint"""
    if context.hint == HINT_USER:
        return USER
    if context.hint == HINT_PRIVATE:
        return PRIVATE_GROUP
    return classify_group(entity, context.gid, context.user,
                          context.private_gid_limit)
