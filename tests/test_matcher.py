"""
Tests for core/matcher.py - 法令名・略称の検索と除外パターン
"""
import pytest
from lawref.core.matcher import find_law_names, is_generic_occurrence
from lawref.core.mentions import Mention, MentionKind, Span


@pytest.fixture
def abbreviation(law_x):
    """前の段落で定義された略称「法」"""
    return Mention(span=Span(0, 1), text="法", target=law_x, kind=MentionKind.DECLARATION)


def spans(mentions):
    return [(m.span.start, m.span.end) for m in mentions]


class TestFindLawNames:
    """法令名テーブルによる検索"""

    def test_single_name(self, table, law_y):
        text = "都市計画法第四条の規定による"
        result = find_law_names(text, table)
        assert len(result) == 1
        assert result[0].span == Span(0, 5)
        assert result[0].target == law_y
        assert result[0].kind == MentionKind.NAME

    def test_character_offsets_after_multibyte_text(self, table):
        """位置はバイトではなく文字単位"""
        text = "第一条　都市計画法"
        result = find_law_names(text, table)
        assert spans(result) == [(4, 9)]

    def test_multiple_occurrences(self, table):
        text = "都市計画法及び都市計画法施行令"
        result = find_law_names(text, table)
        assert spans(result) == [(0, 5), (7, 12)]

    def test_no_match(self, table):
        assert find_law_names("この政令は、公布の日から施行する。", table) == []

    def test_longer_name_wins(self, law_x, law_y):
        """包含される短い名前は捨てる"""
        names = {"計画法": law_x, "都市計画法": law_y}
        result = find_law_names("都市計画法第四条", names)
        assert len(result) == 1
        assert result[0].target == law_y
        assert result[0].span == Span(0, 5)

    def test_longer_name_found_later_replaces(self, law_x, law_y):
        names = {"都市計画法": law_y, "計画法": law_x}
        result = find_law_names("都市計画法第四条", names)
        assert [m.target for m in result] == [law_y]

    def test_abbreviation_from_previous_paragraph(self, abbreviation, law_x):
        text = "法第二条第一項の規定に基づき"
        result = find_law_names(text, {}, [abbreviation])
        assert len(result) == 1
        assert result[0].span == Span(0, 1)
        assert result[0].target == law_x
        assert result[0].kind == MentionKind.ABBREVIATION

    def test_exact_tie_later_wins(self, law_x, law_y):
        """同じ範囲なら後から見つかった略称が残る"""
        names = {"都市計画法": law_y}
        declared = Mention(span=Span(0, 5), text="都市計画法", target=law_x,
                           kind=MentionKind.DECLARATION)
        result = find_law_names("都市計画法第四条", names, [declared])
        assert len(result) == 1
        assert result[0].target == law_x
        assert result[0].kind == MentionKind.ABBREVIATION

    def test_unresolved_abbreviation_ignored(self):
        unresolved = Mention(span=Span(0, 1), text="法", kind=MentionKind.DECLARATION)
        assert find_law_names("法第二条", {}, [unresolved]) == []


class TestSuppression:
    """一般語の一部として現れた法令名を除外"""

    @pytest.mark.parametrize("text", [
        "方法第二条",      # 方法
        "同法第二条",      # 同法
        "旧法第二条",      # 旧法
        "法令の規定",      # 法令
        "法律の規定",      # 法律
        "法人の役員",      # 法人
        "以下「法」という",  # 略称の定義の中
    ])
    def test_hou_generic(self, abbreviation, text):
        assert find_law_names(text, {}, [abbreviation]) == []

    def test_hou_accepted(self, abbreviation):
        assert spans(find_law_names("及び法第二条", {}, [abbreviation])) == [(2, 3)]

    def test_full_name_followed_by_hojin(self, table):
        """〇〇法人"""
        assert find_law_names("都市計画法人", table) == []

    def test_full_name_followed_by_houritsu_dai(self, law_x):
        """「〇〇法律第〇号」の一部"""
        names = {"特別法": law_x}
        assert find_law_names("特別法律第一号", names) == []

    @pytest.mark.parametrize("text", [
        "政令で定める",
        "命令で定める",
        "省令で定める",
        "同令第一条",
        "法令の規定",
    ])
    def test_rei_generic(self, law_x, text):
        rei = Mention(span=Span(0, 1), text="令", target=law_x, kind=MentionKind.DECLARATION)
        assert find_law_names(text, {}, [rei]) == []

    def test_rei_accepted(self, law_x):
        rei = Mention(span=Span(0, 1), text="令", target=law_x, kind=MentionKind.DECLARATION)
        assert spans(find_law_names("令第三条", {}, [rei])) == [(0, 1)]

    def test_kisoku_number(self):
        """〇〇院規則第〇号・〇〇委員会規則第〇号"""
        assert is_generic_occurrence("衆議院規則第一号", "則", 4, 5)
        assert is_generic_occurrence("公正取引委員会規則第一号", "則", 8, 9)
        assert not is_generic_occurrence("規則第一条", "規則", 0, 2)


class TestNameNumberMerge:
    """「法令名（法令番号）」の法令番号側を取り除く"""

    def test_number_in_brackets_removed(self, table, law_z):
        text = "内閣は、消防施設強化促進法（昭和二十八年法律第八十七号）第三条の規定に基き、この政令を制定する。"
        result = find_law_names(text, table)
        assert len(result) == 1
        assert result[0].text == "消防施設強化促進法"
        assert result[0].target == law_z
        start = text.index("消防施設強化促進法")
        assert result[0].span == Span(start, start + len("消防施設強化促進法"))

    def test_number_alone_kept(self, table, law_z):
        text = "昭和二十八年法律第八十七号第三条"
        result = find_law_names(text, table)
        assert len(result) == 1
        assert result[0].text == "昭和二十八年法律第八十七号"
        assert result[0].target == law_z

    def test_different_law_kept(self, law_x, law_z):
        """括弧内の番号が別の法令なら両方残す"""
        names = {
            "消防施設強化促進法": law_z,
            law_x.law_num: law_x,
        }
        text = "消防施設強化促進法（" + law_x.law_num + "）"
        result = find_law_names(text, names)
        assert [m.target for m in result] == [law_z, law_x]

    def test_not_adjacent_kept(self, table):
        """括弧が直後に無ければ両方残す"""
        text = "消防施設強化促進法及び昭和二十八年法律第八十七号"
        result = find_law_names(text, table)
        assert len(result) == 2
