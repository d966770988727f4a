"""
法令名の検索

法令名テーブル（正式名称・法令番号）と、前の段落までに定義された略称を
段落テキストから探し、一般的すぎる語（「方法」「法人」「政令」など）の一部として
現れたものを除外する。
"""
import logging
from typing import List, Mapping, Sequence, Tuple

from .locator import Locator
from .mentions import Mention, MentionKind, Span, merge_name_and_number, resolve_overlap
from ..utils.offsets import byte_to_char_index_map, find_byte_offsets

logger = logging.getLogger(__name__)

# ==============================================================================
# 除外パターン
# ==============================================================================
# 「法」や「令」のような1文字の略称は、隣接する文字と合わせて
# 「同法」「方法」「法人」「命令」「政令」「同令」「法令」のような一般語になることが多い。
# 「〇〇年法律第〇〇号」「〇〇年〇〇省令第〇〇号」「〇〇年〇〇院規則第〇〇号」
# のような法令番号の一部も除外する。

# 「法」の直前にあれば除外: 方法, 同法, 旧法
HOU_EXCLUDED_PREFIXES: Tuple[str, ...] = ('方', '同', '旧')

# 「法」の直後にあれば除外: 法令, 法律
HOU_EXCLUDED_SUFFIXES: Tuple[str, ...] = ('令', '律')

# 「令」の直前にあれば除外: 命令, 政令, 同令, 法令, 省令, 府令, 勅令, 旧令
REI_EXCLUDED_PREFIXES: Tuple[str, ...] = ('命', '政', '同', '法', '省', '府', '勅', '旧')

# 「令第」の直前にあれば除外（政令第○号など）
REI_NUMBER_PREFIXES: Tuple[str, ...] = ('省', '政', '勅', '府')

# 「則第」の直前にあれば除外（衆議院規則第○号、○○委員会規則第○号）
SOKU_NUMBER_PREFIXES: Tuple[str, ...] = ('院規', '会規')


def is_generic_occurrence(text: str, name: str, start: int, end: int) -> bool:
    """
    text[start:end]（= name）の出現が法令名として扱えない一般語の一部か

    Args:
        text: 段落テキスト
        name: 検索した法令名・略称
        start: 出現開始位置（文字単位）
        end: 出現終了位置（文字単位）

    Returns:
        True: 除外すべき出現
    """
    before = text[start - 1] if start > 0 else ''
    before2 = text[start - 2:start] if start >= 2 else ''
    after = text[end:end + 1]
    after2 = text[end:end + 2]

    if name == '法' and (before in HOU_EXCLUDED_PREFIXES or after in HOU_EXCLUDED_SUFFIXES):
        return True
    # 法人, 法律第
    if name.endswith('法') and (after == '人' or after2 == '律第'):
        return True
    if name == '令' and before in REI_EXCLUDED_PREFIXES:
        return True
    if name == '令' and after == '第' and before in REI_NUMBER_PREFIXES:
        return True
    if name.endswith('則') and after == '第' and before2 in SOKU_NUMBER_PREFIXES:
        return True
    # 「」」が続くのは略称の定義の中（detectors 側で扱う）
    if after == '」':
        return True
    return False


def find_law_names(
    text: str,
    law_table: Mapping[str, Locator],
    abbreviations: Sequence[Mention] = (),
) -> List[Mention]:
    """
    段落テキストから法令名・略称の出現を探す

    法令名テーブルの全エントリ、続いて定義済み略称の全エントリについて
    出現位置を列挙し、除外パターンに該当しないものを重複解消しながら追加する。
    最後に「法令名（法令番号）」の法令番号側を取り除く。

    Args:
        text: 段落テキスト
        law_table: 法令名 → 法令の Locator
        abbreviations: 前の段落までに紐付けられた略称定義

    Returns:
        重複解消済みの出現リスト
    """
    encoded = text.encode('utf-8')
    char_index = byte_to_char_index_map(text)

    entries = [(name, target, MentionKind.NAME) for name, target in law_table.items()]
    entries.extend(
        (abb.text, abb.target, MentionKind.ABBREVIATION)
        for abb in abbreviations
        if abb.target is not None
    )

    found: List[Mention] = []
    for name, target, kind in entries:
        if not name:
            continue
        needle = name.encode('utf-8')
        for byte_start in find_byte_offsets(encoded, needle):
            start = char_index[byte_start]
            end = char_index[byte_start + len(needle)]
            if is_generic_occurrence(text, name, start, end):
                continue
            mention = Mention(span=Span(start, end), text=name, target=target, kind=kind)
            found = resolve_overlap(found, mention)

    return merge_name_and_number(found, text)
