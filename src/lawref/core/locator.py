"""
Locator - 法令または法令中の区画（編・章・節・款・目・条・項）を表す識別子

Locator は不変値。文書ルートから一度生成し、構造ノードや段落ごとに
番号を設定した新しい値を派生させて使う。
"""
import re
from dataclasses import dataclass, replace
from datetime import date as Date
from enum import Enum
from functools import cmp_to_key
from typing import Iterable, List, Optional, Sequence, Tuple

from ..utils.numerals import ArticleNumber


class LawType(str, Enum):
    """法令の種別（ELI の type セグメントに使う値）"""
    CONSTITUTION = "constitution"       # 憲法
    ACT = "act"                         # 法律
    CABINET_ORDER = "co"                # 政令, 太政官布告など
    IMPERIAL_ORDER = "io"               # 勅令
    MINISTERIAL_ORDINANCE = "mo"        # 府省令
    RULE = "rule"                       # 規則
    MISC = "misc"                       # その他

    @classmethod
    def from_egov(cls, value: str) -> "LawType":
        """e-Gov XML の LawType 属性から変換"""
        return _EGOV_LAW_TYPES.get(value, cls.MISC)

    @classmethod
    def from_law_id(cls, law_id: str) -> Optional["LawType"]:
        """
        法令ID（例: 129AC0000000089）の種別コードから変換

        判定できない場合は None
        """
        match = re.match(r'^\d{3}([A-Z]+)', law_id)
        if not match:
            return None
        code = match.group(1)
        if code == "CONSTITUTION":
            return cls.CONSTITUTION
        if code == "AC":
            return cls.ACT
        if code == "CO":
            return cls.CABINET_ORDER
        if code == "IO":
            return cls.IMPERIAL_ORDER
        if code.startswith("M"):
            return cls.MINISTERIAL_ORDINANCE
        if code.startswith("R"):
            return cls.RULE
        return None

    @classmethod
    def from_law_num(cls, law_num: str) -> "LawType":
        """法令番号（例: 昭和四十三年法律第百号）から変換"""
        if "憲法" in law_num:
            return cls.CONSTITUTION
        if "法律第" in law_num:
            return cls.ACT
        if "勅令" in law_num:
            return cls.IMPERIAL_ORDER
        if "政令" in law_num:
            return cls.CABINET_ORDER
        if "省令" in law_num or "府令" in law_num:
            return cls.MINISTERIAL_ORDINANCE
        if "規則" in law_num:
            return cls.RULE
        return cls.MISC


_EGOV_LAW_TYPES = {
    "Constitution": LawType.CONSTITUTION,
    "Act": LawType.ACT,
    "CabinetOrder": LawType.CABINET_ORDER,
    "ImperialOrder": LawType.IMPERIAL_ORDER,
    "MinisterialOrdinance": LawType.MINISTERIAL_ORDINANCE,
    "Rule": LawType.RULE,
    "Misc": LawType.MISC,
}

# 区画番号フィールド（上位から順）
NUMBER_FIELDS: Tuple[str, ...] = (
    "part", "chapter", "section", "subsection", "division", "article", "paragraph",
)


@dataclass(frozen=True)
class Locator:
    """
    法令・区画の識別子

    law_id / law_num / law_type が法令そのものを表し、
    part ... paragraph が法令内の位置を表す。paragraph だけが設定され
    article が無いものは前文などの独立した段落を表す。
    """
    law_id: str
    law_num: str = ""
    law_type: LawType = LawType.MISC
    # 法令名が無く，法令番号だけの時がある
    name: Optional[str] = None
    date: Optional[Date] = None
    patch_id: Optional[str] = None
    part: Optional[ArticleNumber] = None
    chapter: Optional[ArticleNumber] = None
    section: Optional[ArticleNumber] = None
    subsection: Optional[ArticleNumber] = None
    division: Optional[ArticleNumber] = None
    article: Optional[ArticleNumber] = None
    paragraph: Optional[ArticleNumber] = None
    paragraph_text: Optional[str] = None
    egov_link: Optional[str] = None

    @property
    def is_law_root(self) -> bool:
        return all(getattr(self, f) is None for f in NUMBER_FIELDS)

    def law_root(self) -> "Locator":
        """番号・段落テキストを取り除いた法令全体の Locator"""
        return replace(
            self,
            **{f: None for f in NUMBER_FIELDS},
            paragraph_text=None,
            egov_link=None,
        )

    def with_numbers(self, **numbers: Optional[ArticleNumber]) -> "Locator":
        """
        区画番号を設定した新しい Locator を返す

        例: 第二条第一項 → with_numbers(article=ArticleNumber(2), paragraph=ArticleNumber(1))
        """
        unknown = set(numbers) - set(NUMBER_FIELDS)
        if unknown:
            raise TypeError(f"Unknown number field(s): {sorted(unknown)}")
        return replace(self, **numbers)

    def with_paragraph(self, number: ArticleNumber, text: Optional[str] = None) -> "Locator":
        return replace(self, paragraph=number, paragraph_text=text)

    def parent(self) -> "Locator":
        """最も深い区画番号を一つ取り除いた親の Locator"""
        if self.paragraph is not None:
            return replace(self, paragraph=None, paragraph_text=None)
        for f in ("article", "division", "subsection", "section", "chapter", "part"):
            if getattr(self, f) is not None:
                return replace(self, **{f: None})
        return self

    def describe(self) -> str:
        """ログ用の短い表記"""
        article = self.article.article_text() if self.article else "-"
        paragraph = self.paragraph.paragraph_text() if self.paragraph else "-"
        return f"{self.law_id} {article} {paragraph}"


# ==============================================================================
# Locator の順序
# ==============================================================================

def locator_sort_key(locator: Locator):
    """
    段落を走査順に並べるためのキー

    1. 条番号なし（前文とみなす）が先
    2. 条番号（主番号 → 枝番 → 枝番の長さ）
    3. 項番号なしが先
    4. 項番号（条番号と同じ規則）
    """
    return (
        locator.article is not None,
        locator.article.sort_key() if locator.article else (),
        locator.paragraph is not None,
        locator.paragraph.sort_key() if locator.paragraph else (),
    )


def compare_locators(a: Locator, b: Locator) -> int:
    """a < b なら -1、a == b なら 0、a > b なら 1"""
    key_a = locator_sort_key(a)
    key_b = locator_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_locators(locators: Iterable[Locator]) -> List[Locator]:
    return sorted(locators, key=cmp_to_key(compare_locators))


def is_sorted(locators: Sequence[Locator]) -> bool:
    """Locator の順序に従って並んでいるか（呼び出し側の前提条件チェック用）"""
    return all(compare_locators(a, b) <= 0 for a, b in zip(locators, locators[1:]))
