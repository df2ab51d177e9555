"""
Test suite for the positional diff engine.

    §1  Equality (empty diffs)
    §2  Objects
    §3  Arrays (positional)
    §4  Type changes and scalars
    §5  Reports
"""

import pytest

from structdoc.core import JNumber
from structdoc.diff import DiffEntry, DiffKind, diff, diff_report, is_equal
from structdoc.formats import from_python, to_python


def D(a, b):
    return diff(from_python(a), from_python(b))


def summary(entries):
    return [(e.path, e.kind.value,
             None if e.before is None else to_python(e.before),
             None if e.after is None else to_python(e.after)) for e in entries]


# ═══════════════════════════════════════════════════════════════════
#  §1  EQUALITY
# ═══════════════════════════════════════════════════════════════════

class TestEquality:

    VALUES = [None, True, 0, 1.5, "s", [], {}, [1, [2]], {"a": {"b": [1, None]}}]

    @pytest.mark.parametrize("value", VALUES)
    def test_self_diff_empty(self, value):
        assert D(value, value) == []

    def test_key_order_ignored(self):
        assert D({"a": 1, "b": 2}, {"b": 2, "a": 1}) == []

    def test_integral_float_equals_int(self):
        assert D({"n": 1}, {"n": 1.0}) == []

    def test_emptiness_is_symmetric(self):
        for a in self.VALUES:
            for b in self.VALUES:
                equal = is_equal(from_python(a), from_python(b))
                assert (D(a, b) == []) == (D(b, a) == []) == equal

    def test_bool_differs_from_number(self):
        assert summary(D(True, 1)) == [("$", "changed", True, 1)]


# ═══════════════════════════════════════════════════════════════════
#  §2  OBJECTS
# ═══════════════════════════════════════════════════════════════════

class TestObjects:

    def test_reference_scenario(self):
        entries = D({"a": 1, "b": 2}, {"a": 1, "b": 3, "c": 4})
        assert entries == [
            DiffEntry("$.b", DiffKind.CHANGED, before=JNumber(2), after=JNumber(3)),
            DiffEntry("$.c", DiffKind.ADDED, after=JNumber(4)),
        ]

    def test_removed_before_added(self):
        assert summary(D({"x": 1, "y": 2}, {"z": 3, "y": 2})) == [
            ("$.x", "removed", 1, None),
            ("$.z", "added", None, 3),
        ]

    def test_nested_paths(self):
        a = {"config": {"debug": False, "port": 8080}}
        b = {"config": {"debug": True, "port": 8080}}
        assert summary(D(a, b)) == [("$.config.debug", "changed", False, True)]

    def test_entries_hold_whole_subtrees(self):
        assert summary(D({}, {"k": {"deep": [1]}})) == [("$.k", "added", None, {"deep": [1]})]


# ═══════════════════════════════════════════════════════════════════
#  §3  ARRAYS
# ═══════════════════════════════════════════════════════════════════

class TestArrays:

    def test_append(self):
        assert summary(D([1, 2], [1, 2, 3])) == [("$[2]", "added", None, 3)]

    def test_truncate(self):
        assert summary(D([1, 2, 3], [1])) == [
            ("$[1]", "removed", 2, None),
            ("$[2]", "removed", 3, None),
        ]

    def test_front_insert_cascades(self):
        """Positional comparison: no alignment, every shifted slot changes."""
        assert summary(D([1, 2, 3], [0, 1, 2, 3])) == [
            ("$[0]", "changed", 1, 0),
            ("$[1]", "changed", 2, 1),
            ("$[2]", "changed", 3, 2),
            ("$[3]", "added", None, 3),
        ]

    def test_nested_element(self):
        a = {"users": [{"name": "Alice", "age": 30}]}
        b = {"users": [{"name": "Alice", "age": 31}]}
        assert summary(D(a, b)) == [("$.users[0].age", "changed", 30, 31)]


# ═══════════════════════════════════════════════════════════════════
#  §4  TYPE CHANGES AND SCALARS
# ═══════════════════════════════════════════════════════════════════

class TestKinds:

    @pytest.mark.parametrize("a,b", [
        ({"a": 1}, [1]),
        ([1], {"a": 1}),
        ([1], 1),
        ("x", {"x": 1}),
        (None, []),
    ])
    def test_type_changed(self, a, b):
        assert summary(D(a, b)) == [("$", "type_changed", a, b)]

    @pytest.mark.parametrize("a,b", [
        (1, 2),
        ("a", "b"),
        ("1", 1),
        (None, 0),
        (True, False),
    ])
    def test_scalar_changed(self, a, b):
        assert summary(D(a, b)) == [("$", "changed", a, b)]

    def test_custom_root_path(self):
        entries = diff(JNumber(1), JNumber(2), path="doc")
        assert entries[0].path == "doc"

    def test_inputs_untouched(self):
        a, b = from_python({"l": [1, 2]}), from_python({"l": [2]})
        diff(a, b)
        assert to_python(a) == {"l": [1, 2]} and to_python(b) == {"l": [2]}


# ═══════════════════════════════════════════════════════════════════
#  §5  REPORTS
# ═══════════════════════════════════════════════════════════════════

class TestReport:

    def test_equal_report(self):
        report = diff_report(from_python({"a": 1}), from_python({"a": 1}))
        assert report == {"equal": True, "diff_count": 0, "diffs": []}

    def test_report_plain_data(self):
        report = diff_report(from_python({"a": 1, "b": 2}),
                             from_python({"a": 1, "b": 3, "c": 4}))
        assert report == {
            "equal": False,
            "diff_count": 2,
            "diffs": [
                {"path": "$.b", "kind": "changed", "before": 2, "after": 3},
                {"path": "$.c", "kind": "added", "after": 4},
            ],
        }

    def test_null_before_is_reported(self):
        entry = diff(from_python({"a": None}), from_python({"a": 1}))[0]
        assert entry.to_python() == {"path": "$.a", "kind": "changed",
                                     "before": None, "after": 1}
