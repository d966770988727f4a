"""
Tests for core/trailing.py - 法令名の後ろの条項番号
"""
import pytest
from lawref.core.mentions import Mention, Span
from lawref.core.trailing import attach_trailing_locator, collect_trailing_run
from lawref.utils.numerals import ArticleNumber


@pytest.fixture
def mention_for(law_y):
    """text 内の最初の name の出現を law_y に解決済みの Mention にする"""
    def _make(text, name="都市計画法"):
        start = text.index(name)
        return Mention(span=Span(start, start + len(name)), text=name, target=law_y)
    return _make


class TestCollectTrailingRun:

    def test_skips_parenthesis(self):
        text = "都市計画法（昭和四十三年法律第百号）第四条第二項に規定する"
        run, positions = collect_trailing_run(text, 5)
        assert run == "第四条第二項"
        assert positions[0] == text.index("第四条")
        assert positions[-1] == text.index("に") - 1

    def test_trims_trailing_no(self):
        run, _ = collect_trailing_run("法第三条の二の規定", 1)
        assert run == "第三条の二"

    def test_unbalanced_closing_parenthesis_ends_scan(self):
        run, positions = collect_trailing_run("（都市計画法）第四条", 6)
        assert run == ""
        assert positions == []

    def test_nested_parenthesis(self):
        text = "法（甲（乙）丙）第一条"
        run, _ = collect_trailing_run(text, 1)
        assert run == "第一条"


class TestAttachTrailingLocator:

    def test_article_with_branch(self, mention_for):
        """第三条の二の規定に基き → 第三条の二、「の規定」の前で止まる"""
        text = "都市計画法第三条の二の規定に基き"
        target, end = attach_trailing_locator(text, mention_for(text))
        assert target.article == ArticleNumber(3, (2,))
        assert target.paragraph is None
        assert end == text.index("の規定")
        assert text[:end].endswith("第三条の二")

    def test_after_parenthesised_number(self, mention_for, law_y):
        text = "国土交通大臣が都市計画法（昭和四十三年法律第百号）第四条第二項に規定する"
        mention = mention_for(text)
        target, end = attach_trailing_locator(text, mention)
        assert target.law_id == law_y.law_id
        assert target.article == ArticleNumber(4)
        assert target.paragraph == ArticleNumber(2)
        assert text[mention.span.start:end] == "都市計画法（昭和四十三年法律第百号）第四条第二項"

    def test_no_trailing_numbers(self, mention_for, law_y):
        text = "都市計画法の規定により"
        mention = mention_for(text)
        target, end = attach_trailing_locator(text, mention)
        assert target == law_y
        assert end == mention.span.end

    def test_malformed_numbers_ignored(self, mention_for, law_y):
        text = "都市計画法第条に"
        mention = mention_for(text)
        target, end = attach_trailing_locator(text, mention)
        assert target == law_y
        assert end == mention.span.end

    def test_well_formed_prefix_only(self, mention_for):
        """号は読まない"""
        text = "都市計画法第四条第二項第三号"
        target, end = attach_trailing_locator(text, mention_for(text))
        assert target.article == ArticleNumber(4)
        assert target.paragraph == ArticleNumber(2)
        assert text[:end] == "都市計画法第四条第二項"

    def test_chapter(self, mention_for):
        text = "都市計画法第三章の規定"
        target, _ = attach_trailing_locator(text, mention_for(text))
        assert target.chapter == ArticleNumber(3)
        assert target.article is None

    def test_large_numbers(self, mention_for):
        text = "都市計画法第百二十三条第十一項"
        target, end = attach_trailing_locator(text, mention_for(text))
        assert target.article == ArticleNumber(123)
        assert target.paragraph == ArticleNumber(11)
        assert end == len(text)

    def test_inside_parenthesis(self, mention_for, law_y):
        """括弧書きの中の法令名には括弧の外の番号を付けない"""
        text = "（都市計画法）第四条"
        mention = mention_for(text)
        target, end = attach_trailing_locator(text, mention)
        assert target == law_y
        assert end == mention.span.end
