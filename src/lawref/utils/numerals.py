"""
lawref: 条項番号の数値変換ユーティリティ

- 漢数字 ⇔ 整数
- 「第三条の二」⇔ ArticleNumber(3, (2,))
- e-Gov の Num 属性（"3_2"）⇔ ArticleNumber
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# ==============================================================================
# 漢数字変換
# ==============================================================================

KANJI_TO_DIGIT: Dict[str, int] = {
    '〇': 0, '零': 0,
    '一': 1, '壱': 1,
    '二': 2, '弐': 2,
    '三': 3, '参': 3,
    '四': 4,
    '五': 5,
    '六': 6,
    '七': 7,
    '八': 8,
    '九': 9,
}

UNIT_MAP: Dict[str, int] = {
    '十': 10,
    '百': 100,
    '千': 1000,
    '万': 10000,
}

DIGIT_TO_KANJI: Tuple[str, ...] = ('', '一', '二', '三', '四', '五', '六', '七', '八', '九')

# 全角数字 → 半角数字
FULLWIDTH_DIGITS = str.maketrans('０１２３４５６７８９', '0123456789')

# 条項番号の区分文字
# 編・章・節・款・目・条・項・号
CLASSIFIERS = '編章節款目条項号'

_NUMERAL_CHARS = '〇零一壱二弐三参四五六七八九十百千万0-9０-９'

# 第(N)(区分)(のM)* 形式
# グループ1: 主番号, グループ2: 区分文字, グループ3: 枝番部分（「の二の三」）
ARTICLE_NUMBER_PATTERN = re.compile(
    rf'^第([{_NUMERAL_CHARS}]+)([{CLASSIFIERS}])?((?:[のノ][{_NUMERAL_CHARS}]+)*)$'
)

BRANCH_PATTERN = re.compile(rf'[のノ]([{_NUMERAL_CHARS}]+)')


def kanji_to_int(text: str) -> int:
    """
    漢数字を整数に変換

    対応形式:
    - 位取り形式: 二十三 → 23, 百二 → 102, 千二百三十四 → 1234
    - 連結形式: 一一 → 11, 八七 → 87
    - 算用数字（半角・全角）: 23 → 23, ２３ → 23

    Examples:
        >>> kanji_to_int('二十三')
        23
        >>> kanji_to_int('百二')
        102
        >>> kanji_to_int('一一')
        11
    """
    if not text:
        return 0
    normalized = text.translate(FULLWIDTH_DIGITS)
    if normalized.isdigit():
        return int(normalized)

    if any(c in UNIT_MAP for c in text):
        return _parse_positional_kanji(text)
    return _parse_concatenative_kanji(text)


def _parse_positional_kanji(text: str) -> int:
    """位取り形式の漢数字をパース（二十三 → 23）"""
    total = 0
    section = 0
    current = 0

    for char in text:
        if char in KANJI_TO_DIGIT:
            current = KANJI_TO_DIGIT[char]
        elif char == '万':
            section += current
            total += (section or 1) * 10000
            section = 0
            current = 0
        elif char in UNIT_MAP:
            unit = UNIT_MAP[char]
            if current == 0:
                current = 1
            section += current * unit
            current = 0

    return total + section + current


def _parse_concatenative_kanji(text: str) -> int:
    """連結形式の漢数字をパース（一一 → 11）"""
    result = ''
    for char in text:
        if char in KANJI_TO_DIGIT:
            result += str(KANJI_TO_DIGIT[char])
    return int(result) if result else 0


def int_to_kanji(number: int) -> str:
    """
    整数を法令表記の漢数字に変換（9999まで）

    Examples:
        >>> int_to_kanji(23)
        '二十三'
        >>> int_to_kanji(100)
        '百'
        >>> int_to_kanji(1205)
        '千二百五'
    """
    if number == 0:
        return '〇'
    if number >= 10000:
        upper, lower = divmod(number, 10000)
        return f"{int_to_kanji(upper)}万{int_to_kanji(lower) if lower else ''}"

    result = ''
    for unit, unit_char in ((1000, '千'), (100, '百'), (10, '十')):
        digit, number = divmod(number, unit)
        if digit:
            # 一千・一百・一十 とは書かない
            result += ('' if digit == 1 else DIGIT_TO_KANJI[digit]) + unit_char
    return result + DIGIT_TO_KANJI[number]


# ==============================================================================
# 条項番号
# ==============================================================================

@dataclass(frozen=True)
class ArticleNumber:
    """
    枝番付きの条項番号

    「第二条の三の四」→ base_number=2, branch_numbers=(3, 4)
    """
    base_number: int
    branch_numbers: Tuple[int, ...] = ()

    def sort_key(self) -> Tuple[int, Tuple[int, ...]]:
        """
        比較用キー

        主番号 → 枝番を要素ごと → 枝番の長さ の順に比較される
        （タプル比較により共通部分が等しければ短い方が先）。
        """
        return (self.base_number, self.branch_numbers)

    def num_str(self) -> str:
        """e-Gov の Num 属性形式（"3_2"）"""
        return '_'.join(str(n) for n in (self.base_number, *self.branch_numbers))

    @classmethod
    def from_num_attr(cls, num: str) -> Optional['ArticleNumber']:
        """
        e-Gov の Num 属性から生成

        範囲指定（"73:76"）は先頭の番号を採用する。

        Examples:
            >>> ArticleNumber.from_num_attr('3_2')
            ArticleNumber(base_number=3, branch_numbers=(2,))
        """
        head = num.split(':', 1)[0].strip()
        parts = head.split('_')
        if not parts or not all(p.isdigit() for p in parts):
            return None
        return cls(int(parts[0]), tuple(int(p) for p in parts[1:]))

    def _text(self, classifier: str) -> str:
        branches = ''.join(f"の{int_to_kanji(n)}" for n in self.branch_numbers)
        return f"第{int_to_kanji(self.base_number)}{classifier}{branches}"

    def part_text(self) -> str:
        return self._text('編')

    def chapter_text(self) -> str:
        return self._text('章')

    def section_text(self) -> str:
        return self._text('節')

    def subsection_text(self) -> str:
        return self._text('款')

    def division_text(self) -> str:
        return self._text('目')

    def article_text(self) -> str:
        return self._text('条')

    def paragraph_text(self) -> str:
        return self._text('項')


def parse_article_number(text: str) -> Optional[ArticleNumber]:
    """
    日本語の条項番号をパース

    Args:
        text: '第三条', '第三条の二', '第十条ノ二', '第二項' などの文字列

    Returns:
        ArticleNumber、パースできない場合は None

    Examples:
        >>> parse_article_number('第三条の二')
        ArticleNumber(base_number=3, branch_numbers=(2,))
        >>> parse_article_number('規定') is None
        True
    """
    match = ARTICLE_NUMBER_PATTERN.match(text)
    if not match:
        return None

    base = kanji_to_int(match.group(1))
    branches = tuple(kanji_to_int(b) for b in BRANCH_PATTERN.findall(match.group(3)))
    return ArticleNumber(base, branches)
