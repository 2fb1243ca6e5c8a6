# vim: tabstop=4 expandtab shiftwidth=4 softtabstop=4

"""Helpers turning quota tool columns into record fields"""

from hpcquota.record import Pair, UNKNOWN, UNLIMITED
from hpcquota.status import parse_grace
from hpcquota.units import parse_scaled

OVER_MARKER = "*"

def scaled_field(text):
    """parse a used/quota/limit column, keeping the sentinels"""
    text = text.strip().rstrip(OVER_MARKER)
    if text in (UNKNOWN, UNLIMITED):
        return text
    return parse_scaled(text)

def text_pair(used, soft, hard, grace):
    """Pair from the four text columns used quota limit grace, as printed
       by quota, lfs quota and mmlsquota"""
    return Pair(scaled_field(used),
                scaled_field(soft),
                scaled_field(hard),
                parse_grace(grace),
                used.strip().endswith(OVER_MARKER))

def split_lines(raw_output):
    """non-empty, stripped lines of raw_output"""
    if not raw_output:
        return []
    return [l.strip() for l in raw_output.splitlines() if l.strip()]
