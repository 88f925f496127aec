"""
Share Recovery :: Selection & End-to-End Recovery Tests
========================================================

What we check:
  1. Declared order:  the first K shares of the document are used,
                      whatever their x or y values.
  2. End-to-end:      record -> decode -> select -> interpolate.
  3. Failures:        each stage surfaces its own named error.
  4. Audit trail:     every stage is recorded; the secret never is.
"""

import pytest

from share_recovery.audit_log import AuditLog, fingerprint
from share_recovery.errors import (
    DuplicateAbscissa,
    InexactDivision,
    InsufficientShares,
    InvalidBase,
    InvalidDigit,
)
from share_recovery.interpolator import Point
from share_recovery.record import parse_record
from share_recovery.recovery import decode_points, recover_secret, select_points


HACKATHON_CASE = {
    "keys": {"n": 4, "k": 3},
    "1": {"base": "10", "value": "4"},
    "2": {"base": "2", "value": "111"},
    "3": {"base": "10", "value": "12"},
    "6": {"base": "4", "value": "213"},
}


def _share(value: int, base: int = 10) -> dict:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while True:
        value, r = divmod(value, base)
        out = digits[r] + out
        if value == 0:
            return {"base": str(base), "value": out}


class TestSelectPoints:

    def test_first_k(self):
        points = [Point(5, 1), Point(1, 2), Point(3, 3)]
        assert select_points(points, 2) == [Point(5, 1), Point(1, 2)]

    def test_not_sorted(self):
        points = [Point(9, 0), Point(2, 100), Point(4, 5)]
        assert [p.x for p in select_points(points, 3)] == [9, 2, 4]

    def test_exactly_k(self):
        points = [Point(1, 1)]
        assert select_points(points, 1) == points

    def test_insufficient(self):
        with pytest.raises(InsufficientShares) as exc:
            select_points([Point(1, 1)], 2)
        assert (exc.value.available, exc.value.required) == (1, 2)

    def test_insufficient_is_permission_error(self):
        with pytest.raises(PermissionError, match="Insufficient shares"):
            select_points([], 1)


class TestDecodePoints:

    def test_decodes_in_declared_order(self):
        points = decode_points(parse_record(HACKATHON_CASE))
        assert points == [Point(1, 4), Point(2, 7), Point(3, 12), Point(6, 39)]

    def test_decode_error_names_share(self):
        record = parse_record({"keys": {"n": 2, "k": 1},
                               "1": {"base": "10", "value": "4"},
                               "2": {"base": "2", "value": "121"}})
        with pytest.raises(InvalidDigit, match="share '2'") as exc:
            decode_points(record)
        assert exc.value.identifier == "2"


class TestRecoverSecret:

    def test_hackathon_case(self):
        """(1,4),(2,7),(3,12) lie on f(x) = x^2 + 3."""
        result = recover_secret(parse_record(HACKATHON_CASE))
        assert result.secret == 3
        assert result.threshold == 3
        assert result.points == (Point(1, 4), Point(2, 7), Point(3, 12))

    def test_linear_zero_secret(self):
        """keys {n:4,k:3}, shares (1,3),(2,6),(3,9) of f(x) = 3x."""
        record = parse_record({
            "keys": {"n": 4, "k": 3},
            "1": {"base": "10", "value": "3"},
            "2": {"base": "2", "value": "110"},
            "3": {"base": "16", "value": "9"},
            "4": {"base": "16", "value": "c"},
        })
        assert recover_secret(record).secret == 0

    def test_declared_order_decides_selection(self):
        """
        Declared first: (3,9),(1,5) on f(x) = 3 + 2x  -> secret 3.
        Sorted by x it would be (1,5),(2,100)       -> secret -90.
        """
        record = parse_record({
            "keys": {"n": 4, "k": 2},
            "3": {"base": "10", "value": "9"},
            "1": {"base": "10", "value": "5"},
            "2": {"base": "10", "value": "100"},
            "4": {"base": "10", "value": "0"},
        })
        result = recover_secret(record)
        assert [p.x for p in result.points] == [3, 1]
        assert result.secret == 3

    def test_extra_shares_ignored(self):
        """Shares past K do not affect the result, even if inconsistent."""
        case = dict(HACKATHON_CASE)
        case["6"] = {"base": "10", "value": "999999"}
        assert recover_secret(parse_record(case)).secret == 3

    def test_large_shares(self):
        """A degree-5 polynomial with ~200-digit coefficients, mixed bases."""
        secret = 98765432109876543210 ** 10
        coefficients = [secret, 7**250, 11**190, 13**170, 3**400, 5**280]
        shares = {}
        for x, base in zip(range(1, 7), (2, 7, 10, 16, 29, 36)):
            y = sum(c * x**i for i, c in enumerate(coefficients))
            shares[str(x)] = _share(y, base)
        record = parse_record({"keys": {"n": 6, "k": 6}, **shares})
        assert recover_secret(record).secret == secret

    def test_invalid_base(self):
        record = parse_record({"keys": {"n": 2, "k": 2},
                               "1": {"base": "37", "value": "1"},
                               "2": {"base": "10", "value": "2"}})
        with pytest.raises(InvalidBase, match="37"):
            recover_secret(record)

    def test_duplicate_abscissa_from_identifiers(self):
        """'1' and '01' are different keys but the same x."""
        record = parse_record({"keys": {"n": 2, "k": 2},
                               "1": {"base": "10", "value": "5"},
                               "01": {"base": "10", "value": "7"}})
        with pytest.raises(DuplicateAbscissa):
            recover_secret(record)

    def test_inconsistent_shares(self):
        record = parse_record({"keys": {"n": 2, "k": 2},
                               "1": {"base": "10", "value": "1"},
                               "3": {"base": "10", "value": "2"}})
        with pytest.raises(InexactDivision):
            recover_secret(record)

    def test_fewer_shares_than_threshold(self):
        record = parse_record({"keys": {"n": 5, "k": 3},
                               "1": {"base": "10", "value": "1"},
                               "2": {"base": "10", "value": "2"}})
        with pytest.raises(InsufficientShares):
            recover_secret(record)


class TestRecoveryAudit:

    def test_stages_recorded(self):
        log = AuditLog()
        recover_secret(parse_record(HACKATHON_CASE), log)
        assert [e.event for e in log.get_entries()] == [
            "points_decoded", "points_selected", "secret_recovered",
        ]
        assert log.verify_integrity()

    def test_selected_identifiers_recorded(self):
        log = AuditLog()
        recover_secret(parse_record(HACKATHON_CASE), log)
        entry = log.get_entries(event="points_selected")[0]
        assert entry.data == {"threshold": 3, "identifiers": ["1", "2", "3"]}

    def test_secret_only_fingerprinted(self):
        log = AuditLog()
        result = recover_secret(parse_record(HACKATHON_CASE), log)
        entry = log.get_entries(event="secret_recovered")[0]
        assert entry.data == {"fingerprint": fingerprint(result.secret)}

    def test_declared_identifiers_recorded(self):
        """Identifiers are logged as written, not as their integer value."""
        log = AuditLog()
        record = parse_record({"keys": {"n": 2, "k": 2},
                               "01": {"base": "10", "value": "5"},
                               "2": {"base": "10", "value": "7"}})
        recover_secret(record, log)
        assert log.get_entries(event="points_decoded")[0].data["identifiers"] == ["01", "2"]
        assert log.get_entries(event="points_selected")[0].data["identifiers"] == ["01", "2"]

    def test_failure_recorded(self):
        log = AuditLog()
        record = parse_record({"keys": {"n": 2, "k": 2},
                               "1": {"base": "10", "value": "1"},
                               "3": {"base": "10", "value": "2"}})
        with pytest.raises(InexactDivision):
            recover_secret(record, log)
        failure = log.get_entries(event="recovery_failed")[0]
        assert failure.stage == "interpolate"
        assert failure.data["error"] == "InexactDivision"
        assert not log.get_entries(event="secret_recovered")
