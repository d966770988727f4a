"""
Tests for core/output.py - 参照エッジ・包含エッジの出力
"""
import json

import pytest
from lawref.core.document import LawDocument
from lawref.core.mentions import ResolvedReference, Span
from lawref.core.output import (
    ReferenceWriter,
    containment_records,
    level_name,
    reference_to_record,
)
from lawref.utils.numerals import ArticleNumber

BASE = "https://example.org/eli"
TEXT = "都市計画法（昭和四十三年法律第百号）第四条第二項に規定する"


@pytest.fixture
def document(source):
    chapter = source.with_numbers(chapter=ArticleNumber(1))
    article = chapter.with_numbers(article=ArticleNumber(1))
    para = article.with_paragraph(ArticleNumber(1), TEXT)
    return LawDocument(root=source, toc=[chapter, article], paragraphs=[para])


@pytest.fixture
def reference(document, law_y):
    target = law_y.with_numbers(article=ArticleNumber(4), paragraph=ArticleNumber(2))
    end = TEXT.index("に規定")
    return ResolvedReference(source=document.paragraphs[0], target=target, span=Span(0, end))


class TestReferenceRecord:

    def test_fields(self, reference):
        record = reference_to_record(reference, BASE)
        assert record["type"] == "refers_to"
        assert record["from"] == f"{BASE}/1963/01/01/co/338CO0000000001/000000000000000/article1/paragraph1"
        assert record["to"] == f"{BASE}/1968/06/15/act/343AC0000000100/000000000000000/article4/paragraph2"
        assert record["evidence"] == "都市計画法（昭和四十三年法律第百号）第四条第二項"
        assert record["position"] == {"start": 0, "end": reference.span.end}
        assert record["to_url"].endswith("#Mp-At_4-Pr_2")
        assert "#Mp-Ch_1-At_1-Pr_1" in record["from_url"]

    def test_json_serializable(self, reference):
        dumped = json.dumps(reference_to_record(reference, BASE), ensure_ascii=False)
        assert "都市計画法" in dumped


class TestContainmentRecords:

    def test_levels(self, document):
        chapter, article = document.toc
        assert level_name(document.root) == "law"
        assert level_name(chapter) == "chapter"
        assert level_name(article) == "article"
        assert level_name(document.paragraphs[0]) == "paragraph"

    def test_both_directions(self, document):
        records = containment_records(document, BASE)
        relations = [(r["type"], r["relation"]) for r in records]
        assert relations == [
            ("contains", "law_contains_chapter"),
            ("part_of", "chapter_part_of_law"),
            ("contains", "chapter_contains_article"),
            ("part_of", "article_part_of_chapter"),
            ("contains", "article_contains_paragraph"),
            ("part_of", "paragraph_part_of_article"),
        ]

    def test_inverse_pairs(self, document):
        records = containment_records(document, BASE)
        contains = {(r["source"], r["target"]) for r in records if r["type"] == "contains"}
        part_of = {(r["target"], r["source"]) for r in records if r["type"] == "part_of"}
        assert contains == part_of

    def test_no_duplicates(self, document):
        doubled = LawDocument(root=document.root, toc=document.toc * 2, paragraphs=document.paragraphs)
        assert len(containment_records(doubled, BASE)) == len(containment_records(document, BASE))


class TestReferenceWriter:

    def test_write_document(self, document, reference, tmp_path):
        path = ReferenceWriter(base=BASE).write_document(document, [reference], tmp_path)
        assert path == tmp_path / "338CO0000000001_000000000000000.jsonl"
        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["evidence"].startswith("都市計画法")

    def test_no_file_without_references(self, document, tmp_path):
        assert ReferenceWriter().write_document(document, [], tmp_path) is None
        assert list(tmp_path.glob("*.jsonl")) == []

    def test_structure_file(self, document, reference, tmp_path):
        writer = ReferenceWriter(base=BASE, include_structure=True)
        writer.write_document(document, [reference], tmp_path)
        structure = tmp_path / "338CO0000000001_000000000000000.structure.jsonl"
        assert len(structure.read_text(encoding="utf-8").splitlines()) == 6
