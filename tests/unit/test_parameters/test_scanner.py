"""Tests for placeholder scanning."""

import pytest

from prestospec.parameters.scanner import PLACEHOLDER_MARKER, scan_placeholder_offsets

LONG_QUERY = """SELECT   abc,
         def,
         ghi,
         Max(timestamp)
FROM     hive.infra.fp_system
WHERE    host = ?
GROUP BY (abc, def, ghi)"""


@pytest.mark.parametrize(
    ("sql", "expected_count"),
    [
        ("SELECT * FROM abc WHERE blah = ?", 1),
        ("SELECT * FROM abc WHERE blah = ? and foo = ? and bar = ? or (hello = ? and world= ?) or do = ?", 6),
        (LONG_QUERY, 1),
        ("SELECT * FROM abc", 0),
        ("", 0),
        ("???", 3),
    ],
    ids=["one_at_end", "six", "suffix_clauses", "none", "empty", "adjacent"],
)
def test_scan_counts_and_positions(sql: str, expected_count: int) -> None:
    offsets = scan_placeholder_offsets(sql)

    assert len(offsets) == expected_count
    assert all(sql[offset] == PLACEHOLDER_MARKER for offset in offsets)
    assert list(offsets) == sorted(set(offsets))


def test_scan_exact_offsets() -> None:
    assert scan_placeholder_offsets("a = ? AND b = ?") == (4, 14)
    assert scan_placeholder_offsets("?") == (0,)


def test_scan_returns_tuple() -> None:
    assert scan_placeholder_offsets("SELECT 1") == ()


def test_scan_multibyte_text() -> None:
    sql = "SELECT 'héllo', ? FROM t WHERE x = '日本' AND y = ?"
    offsets = scan_placeholder_offsets(sql)

    assert [sql[offset] for offset in offsets] == ["?", "?"]


def test_scan_is_lexical_inside_quotes() -> None:
    """A marker inside a quoted literal is still reported as a placeholder."""
    sql = "SELECT * FROM t WHERE note = 'why?' AND id = ?"

    offsets = scan_placeholder_offsets(sql)

    assert len(offsets) == 2
    assert offsets[0] == sql.index("why?") + 3


def test_scan_is_lexical_inside_comments() -> None:
    sql = "SELECT 1 -- really?\nWHERE a = ?"

    assert len(scan_placeholder_offsets(sql)) == 2
