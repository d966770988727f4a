"""
略称の定義と「同法」「同令」の検出

どちらも段落単位で独立に動き、見つけた出現の参照先は未解決（None）のまま返す。
参照先の紐付けは linker で行う。
"""
import re
from typing import List, Tuple

from .mentions import Mention, MentionKind, Span, resolve_overlap

# 以下「○○法」という。/ 以下「○○令」という。/ 以下「○○規則」という。
# グループ1: 略称
ABBREVIATION_DEFINITION_PATTERN = re.compile(r'以下「([^」]*(?:法|令|規則))」')

# 方法や命令は略称ではない
GENERIC_ABBREVIATION_SUFFIXES: Tuple[str, ...] = ('方法', '命令')

ANAPHORA_PATTERN = re.compile(r'同法|同令')


def find_abbreviation_definitions(text: str) -> List[Mention]:
    """
    略称の定義箇所を検索

    位置は鉤括弧の中身（略称そのもの）の範囲。

    Examples:
        「陸上交通事業調整法（以下「法」という。）」→ 「法」の位置
    """
    found: List[Mention] = []
    for match in ABBREVIATION_DEFINITION_PATTERN.finditer(text):
        abbreviation = match.group(1)
        if abbreviation.endswith(GENERIC_ABBREVIATION_SUFFIXES):
            continue
        mention = Mention(
            span=Span(match.start(1), match.end(1)),
            text=abbreviation,
            kind=MentionKind.DECLARATION,
        )
        found = resolve_overlap(found, mention)
    return found


def find_anaphora(text: str) -> List[Mention]:
    """
    「同法」「同令」の出現位置を検索

    「同法人」や「同法律第○号」の一部は除外する。
    """
    found: List[Mention] = []
    for match in ANAPHORA_PATTERN.finditer(text):
        following = text[match.end():match.end() + 2]
        if following.startswith('人') or following == '律第':
            continue
        found.append(Mention(
            span=Span(match.start(), match.end()),
            text=match.group(0),
            kind=MentionKind.ANAPHORA,
        ))
    return found
