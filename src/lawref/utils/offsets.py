"""
バイト位置 → 文字位置 変換

法令名の検索は UTF-8 にエンコードしたテキストに対して bytes.find で行うが、
参照位置は常に文字単位で報告する必要がある。
"""

from typing import Iterator, List


def byte_to_char_index_map(text: str) -> List[int]:
    """
    各バイト位置を文字位置に変換するためのテーブルを生成

    長さは UTF-8 バイト長 + 1（終端位置を含む）。
    文字の途中のバイト位置にはその文字の位置が入る。

    Examples:
        >>> byte_to_char_index_map('a法')
        [0, 1, 1, 1, 2]
    """
    table: List[int] = []
    for char_index, char in enumerate(text):
        table.extend([char_index] * len(char.encode('utf-8')))
    table.append(len(text))
    return table


def find_byte_offsets(haystack: bytes, needle: bytes) -> Iterator[int]:
    """
    needle の出現位置（バイト単位）を先頭から順に返す

    同じ needle 同士の出現は重ならない（一致の直後から検索を再開する）。
    """
    if not needle:
        return
    pos = haystack.find(needle)
    while pos >= 0:
        yield pos
        pos = haystack.find(needle, pos + len(needle))
