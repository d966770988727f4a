"""
Tests for core/linker.py - 直前の法令名への紐付け
"""
import pytest
from lawref.core.linker import link_all, link_to_antecedent
from lawref.core.locator import Locator
from lawref.core.mentions import Mention, MentionKind, Span


@pytest.fixture
def laws():
    return {name: Locator(law_id=name) for name in ("A", "B", "C")}


@pytest.fixture
def candidates(laws):
    """[5,7)→A, [8,10)→B, [29,31)→C"""
    return [
        Mention(span=Span(5, 7), text="甲法", target=laws["A"]),
        Mention(span=Span(8, 10), text="乙法", target=laws["B"]),
        Mention(span=Span(29, 31), text="丙法", target=laws["C"]),
    ]


def unresolved(start, end, kind=MentionKind.DECLARATION):
    return Mention(span=Span(start, end), text="法", kind=kind)


class TestLinkToAntecedent:

    def test_nearest_preceding(self, candidates, laws):
        """[20,27) の略称は最も近い前の B に紐付く"""
        linked = link_to_antecedent(unresolved(20, 27), candidates)
        assert linked is not None
        assert linked.target == laws["B"]
        assert linked.span == Span(20, 27)
        assert linked.kind == MentionKind.DECLARATION

    def test_end_equal_to_start_is_preceding(self, candidates, laws):
        linked = link_to_antecedent(unresolved(10, 12), candidates)
        assert linked.target == laws["B"]

    def test_no_preceding(self, candidates):
        assert link_to_antecedent(unresolved(0, 2), candidates) is None

    def test_after_all(self, candidates, laws):
        linked = link_to_antecedent(unresolved(40, 42, MentionKind.ANAPHORA), candidates)
        assert linked.target == laws["C"]

    def test_unresolved_candidates_skipped(self, candidates, laws):
        pending = [Mention(span=Span(12, 14), text="同法", kind=MentionKind.ANAPHORA)]
        linked = link_to_antecedent(unresolved(20, 22), candidates + pending)
        assert linked.target == laws["B"]

    def test_equal_end_later_entry_wins(self, laws):
        same_end = [
            Mention(span=Span(2, 5), text="甲乙法", target=laws["A"]),
            Mention(span=Span(4, 5), text="法", target=laws["B"]),
        ]
        linked = link_to_antecedent(unresolved(10, 12), same_end)
        assert linked.target == laws["B"]

    def test_list_order_does_not_matter_for_distinct_ends(self, candidates, laws):
        linked = link_to_antecedent(unresolved(20, 27), list(reversed(candidates)))
        assert linked.target == laws["B"]


class TestLinkAll:

    def test_drops_unlinkable(self, candidates, laws):
        result = link_all([unresolved(0, 2), unresolved(20, 27)], candidates)
        assert [m.target for m in result] == [laws["B"]]

    def test_empty(self, candidates):
        assert link_all([], candidates) == []
