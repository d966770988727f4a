"""
共通フィクスチャ: テスト用の法令と法令名テーブル
"""
from datetime import date

import pytest

from lawref.core.law_table import LawNameTable
from lawref.core.locator import LawType, Locator
from lawref.utils.numerals import ArticleNumber


@pytest.fixture
def law_x():
    """陸上交通事業調整法"""
    return Locator(
        law_id="313AC0000000071",
        law_num="昭和十三年法律第七十一号",
        law_type=LawType.ACT,
        name="陸上交通事業調整法",
        date=date(1938, 4, 2),
    )


@pytest.fixture
def law_y():
    """都市計画法"""
    return Locator(
        law_id="343AC0000000100",
        law_num="昭和四十三年法律第百号",
        law_type=LawType.ACT,
        name="都市計画法",
        date=date(1968, 6, 15),
    )


@pytest.fixture
def law_z():
    """消防施設強化促進法"""
    return Locator(
        law_id="328AC0000000087",
        law_num="昭和二十八年法律第八十七号",
        law_type=LawType.ACT,
        name="消防施設強化促進法",
        date=date(1953, 8, 13),
    )


@pytest.fixture
def table(law_x, law_y, law_z):
    """法令名・法令番号の両方を登録したテーブル"""
    t = LawNameTable()
    for law in (law_x, law_y, law_z):
        t.add_law(law)
    return t


@pytest.fixture
def source():
    """参照元（ある政令の本文）"""
    return Locator(
        law_id="338CO0000000001",
        law_num="昭和三十八年政令第一号",
        law_type=LawType.CABINET_ORDER,
        name="テスト政令",
        date=date(1963, 1, 1),
    )


@pytest.fixture
def make_paragraph():
    """段落 Locator を作る関数"""
    def _make(law: Locator, article: int, para: int, text: str, branches=()) -> Locator:
        return law.with_numbers(article=ArticleNumber(article, tuple(branches))) \
            .with_paragraph(ArticleNumber(para), text)
    return _make
