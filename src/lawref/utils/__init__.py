"""
lawref ユーティリティモジュール
"""

from .numerals import (
    ArticleNumber,
    kanji_to_int,
    int_to_kanji,
    parse_article_number,
)
from .offsets import (
    byte_to_char_index_map,
    find_byte_offsets,
)

__all__ = [
    # numerals
    'ArticleNumber',
    'kanji_to_int',
    'int_to_kanji',
    'parse_article_number',
    # offsets
    'byte_to_char_index_map',
    'find_byte_offsets',
]
