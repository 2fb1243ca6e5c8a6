# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""
Fixed width quota report:

(T) Path/Filesystem | used quota limit grace | used quota limit grace | Status

Labels and the status may carry terminal escapes, so padding is based on
their visible length.
"""

from colors import ansilen, color

from hpcquota.record import Grace, ScaledValue, UNKNOWN, \
                            STATUS_EXCEEDED, STATUS_UNKNOWN
from hpcquota.units import convert_to_unit, format_scaled

SEP_SINGLE_CHAR = "-"
SEP_DOUBLE_CHAR = "="

VALUE_WIDTH  = 10
GRACE_WIDTH  = 15
STATUS_WIDTH = 9

EXCEEDED_WARNING = "EXCEEDED!"
LABEL_TITLE      = "Path/Filesystem"

def label_width(names, prefix = 0):
    """first column width: the longest entity name plus the width of the
       path around it"""
    names = list(names)
    if not names:
        return prefix
    return prefix + max(len(n) for n in names)

def ljust(text, width):
    return text + " " * max(0, width - ansilen(text))

def rjust(text, width):
    return " " * max(0, width - ansilen(text)) + text

def value_text(value):
    """Render a used/quota/limit value.  Values without unit get a
       trailing space so their digits line up with the unit values."""
    if not isinstance(value, ScaledValue):
        return value
    text = format_scaled(value)
    return text if text[-1].isalpha() else text + " "

def grace_text(grace):
    if grace is None:
        return "none"
    if isinstance(grace, Grace):
        return grace.text
    return UNKNOWN

def status_text(status, context):
    if status == STATUS_EXCEEDED:
        if context.plain_text:
            return EXCEEDED_WARNING
        return color(EXCEEDED_WARNING, style = "blink")
    if status == STATUS_UNKNOWN:
        return "Unknown"
    return status

def pair_columns(pair, normalize = False):
    """the four text columns of a space or files pair"""
    values = [pair.used, pair.soft, pair.hard]
    if normalize:
        values = [convert_to_unit(v, "T") if isinstance(v, ScaledValue)
                  else v for v in values]
    return [value_text(v).rjust(VALUE_WIDTH) for v in values] + \
           [grace_text(pair.grace).rjust(GRACE_WIDTH)]

def format_columns(kind, label, space, files, status, width):
    return "({0:1}) {1} | {2} | {3} | {4}".format(
        kind,
        ljust(label, width),
        "  ".join(space),
        "  ".join(files),
        rjust(status, STATUS_WIDTH))

def format_line(record, width, context):
    """one report line for record, space is normalized to T on request,
       file counts never are"""
    return format_columns(record.kind,
                          record.label,
                          pair_columns(record.space, context.normalize),
                          pair_columns(record.files),
                          status_text(record.status, context),
                          width)

def format_header(width):
    """the two header rows"""
    pair_width = 3 * VALUE_WIDTH + GRACE_WIDTH + 3 * 2
    hh = "    {0} | {1} | {2} |".format(
        " " * width,
        "Total size of files and folders".rjust(pair_width),
        "Total number of files and folders".rjust(pair_width))
    titles = [t.rjust(VALUE_WIDTH) for t in ("used", "quota", "limit")] + \
             ["grace".rjust(GRACE_WIDTH)]
    header = format_columns("T", LABEL_TITLE, titles, titles,
                            "Status", width)
    return [hh, header]

def batch_width(blocks, context):
    """label column width for the whole report, wide enough for the header
       title"""
    labels = [ansilen(r.label) for block in blocks for r in block]
    return max([context.label_width, len(LABEL_TITLE)] + labels)

def format_report(blocks, context):
    """Render blocks, lists of QuotaRecords per entity in discovery order,
       into report lines.  Empty blocks are left out."""
    width = batch_width(blocks, context)
    header = format_header(width)
    total = ansilen(header[1])
    lines = [SEP_DOUBLE_CHAR * total] + header
    for block in blocks:
        if not block:
            continue
        lines.append(SEP_SINGLE_CHAR * total)
        for record in block:
            lines.append(format_line(record, width, context))
    lines.append(SEP_DOUBLE_CHAR * total)
    return lines
