from hpcquota.record import Grace, Pair, QuotaRecord, ScaledValue, \
                            UNKNOWN, UNLIMITED, USER, STATUS_OK, \
                            STATUS_EXCEEDED, STATUS_UNKNOWN
from hpcquota.status import combine, fix_grace, hard_reached, pair_status, \
                            parse_grace, resolve


def gib(n):
    return ScaledValue(n, "G")


def test_no_grace():
    assert parse_grace("-") is None
    assert parse_grace("none") is None
    assert parse_grace("") is None


def test_grace_days_get_a_space():
    assert parse_grace("6days") == Grace(6, "6 days")
    assert parse_grace("1day") == Grace(1, "1 day")


def test_grace_other_notations():
    assert parse_grace("6d23h") == Grace(6, "6d23h")
    assert parse_grace("1w2d") == Grace(9, "1w2d")
    assert parse_grace("23:59") == Grace(0, "23:59")
    assert parse_grace("expired") == Grace(0, "expired")


def test_grace_unknown():
    assert parse_grace("unknown") == UNKNOWN


def test_wrapped_grace_is_zero_days():
    assert parse_grace("49696days") == Grace(0, "0 days")
    assert parse_grace("49697days") == Grace(0, "0 days")
    assert fix_grace(Grace(49697, "49697 days")) == Grace(0, "0 days")


def test_fix_grace_leaves_other_values():
    assert fix_grace(None) is None
    assert fix_grace(UNKNOWN) == UNKNOWN
    assert fix_grace(Grace(6, "6 days")) == Grace(6, "6 days")


def test_hard_reached():
    assert hard_reached(Pair(gib(2), gib(1), gib(2), None, False))
    assert not hard_reached(Pair(gib(1), gib(1), gib(2), None, False))
    # 0 means no limit
    assert not hard_reached(Pair(gib(5), gib(0), gib(0), None, False))
    assert not hard_reached(Pair(gib(5), UNKNOWN, UNLIMITED, UNKNOWN, False))


def test_hard_reached_across_units():
    used = ScaledValue(23.09, "T")
    assert hard_reached(Pair(used, gib(0), ScaledValue(20, "T"), None, False))
    assert hard_reached(Pair(used, gib(0), gib(20000), None, False))


def test_pair_status():
    assert pair_status(Pair(gib(1), gib(2), gib(3), None, False)) == \
           STATUS_OK
    assert pair_status(Pair(gib(1), gib(2), gib(3), None, True)) == \
           STATUS_EXCEEDED
    assert pair_status(Pair(gib(1), gib(2), gib(3), Grace(0, "0 days"),
                            False)) == STATUS_EXCEEDED
    assert pair_status(Pair(gib(1), UNKNOWN, UNLIMITED, UNKNOWN, False)) == \
           STATUS_UNKNOWN
    assert pair_status(Pair(gib(3), UNKNOWN, gib(3), UNKNOWN, False)) == \
           STATUS_EXCEEDED


def test_combine():
    assert combine(STATUS_OK, STATUS_OK) == STATUS_OK
    assert combine(STATUS_OK, STATUS_UNKNOWN) == STATUS_UNKNOWN
    assert combine(STATUS_UNKNOWN, STATUS_EXCEEDED) == STATUS_EXCEEDED


def test_resolve_sets_status_and_fixes_grace():
    record = QuotaRecord(USER, "/home",
                         Pair(gib(3), gib(2), gib(4),
                              Grace(49697, "49697days"), True),
                         Pair(ScaledValue(10, ""), ScaledValue(0, ""),
                              ScaledValue(0, ""), None, False),
                         None)
    resolved = resolve(record)
    assert resolved.space.grace == Grace(0, "0 days")
    assert resolved.status == STATUS_EXCEEDED
    assert resolve(resolved) == resolved
