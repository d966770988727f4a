"""
Tests for utils/offsets.py - バイト位置と文字位置の対応
"""
from lawref.utils.offsets import byte_to_char_index_map, find_byte_offsets


class TestByteToCharIndexMap:

    def test_ascii(self):
        assert byte_to_char_index_map("abc") == [0, 1, 2, 3]

    def test_multibyte(self):
        """日本語は1文字3バイト"""
        assert byte_to_char_index_map("a法") == [0, 1, 1, 1, 2]

    def test_length_is_byte_length_plus_one(self):
        text = "都市計画法（昭和四十三年法律第百号）"
        table = byte_to_char_index_map(text)
        assert len(table) == len(text.encode("utf-8")) + 1
        assert table[-1] == len(text)

    def test_empty(self):
        assert byte_to_char_index_map("") == [0]

    def test_monotonic(self):
        table = byte_to_char_index_map("a法b令c")
        assert table == sorted(table)


class TestFindByteOffsets:

    def test_all_occurrences(self):
        text = "法第一条及び法第二条"
        encoded = text.encode("utf-8")
        table = byte_to_char_index_map(text)
        starts = [table[b] for b in find_byte_offsets(encoded, "法".encode("utf-8"))]
        assert starts == [0, 6]

    def test_non_overlapping(self):
        assert list(find_byte_offsets(b"aaaa", b"aa")) == [0, 2]

    def test_empty_needle(self):
        assert list(find_byte_offsets(b"abc", b"")) == []

    def test_not_found(self):
        assert list(find_byte_offsets(b"abc", b"x")) == []
