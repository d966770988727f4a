"""
抽出結果の出力

参照エッジ（refers_to）と包含エッジ（contains / part_of）を JSONL で書き出す。

参照エッジ:
{
  "from": "<参照元段落の ELI URI>",
  "to": "<参照先の ELI URI>",
  "type": "refers_to",
  "evidence": "都市計画法（昭和四十三年法律第百号）第四条第二項",
  "position": {"start": 12, "end": 37},
  "from_url": "<参照元の e-Gov URL>",
  "to_url": "<参照先の e-Gov URL>"
}

包含エッジ:
{
  "source": "<親の ELI URI>",
  "target": "<子の ELI URI>",
  "type": "contains" | "part_of",
  "relation": "chapter_contains_article" など
}
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .document import LawDocument
from .eli import eli_uri, published_url
from .locator import Locator
from .mentions import ResolvedReference
from ..config import DEFAULT_PATCH_ID, ELI_BASE_URI

logger = logging.getLogger(__name__)

# 区画の種類名（深い方から）
_LEVELS = ("paragraph", "article", "division", "subsection", "section", "chapter", "part")


def level_name(locator: Locator) -> str:
    """最も深い区画の種類名。番号が無ければ 'law'"""
    for level in _LEVELS:
        if getattr(locator, level) is not None:
            return level
    return "law"


def reference_to_record(ref: ResolvedReference, base: str = ELI_BASE_URI) -> Dict[str, Any]:
    """参照を JSON レコードに変換"""
    text = ref.source.paragraph_text or ""
    return {
        "from": eli_uri(ref.source, base),
        "to": eli_uri(ref.target, base),
        "type": "refers_to",
        "evidence": text[ref.span.start:ref.span.end],
        "position": {"start": ref.span.start, "end": ref.span.end},
        "from_url": published_url(ref.source),
        "to_url": published_url(ref.target),
    }


def containment_records(document: LawDocument, base: str = ELI_BASE_URI) -> List[Dict[str, Any]]:
    """
    文書の包含関係を contains / part_of の両方向のレコードにする

    同じ (source, target, type) は一度だけ出力する。
    """
    records: List[Dict[str, Any]] = []
    seen: set = set()

    for parent, child in document.containment_edges():
        parent_id = eli_uri(parent, base)
        child_id = eli_uri(child, base)
        if parent_id == child_id:
            continue
        parent_level = level_name(parent)
        child_level = level_name(child)
        for source, target, edge_type, relation in (
            (parent_id, child_id, "contains", f"{parent_level}_contains_{child_level}"),
            (child_id, parent_id, "part_of", f"{child_level}_part_of_{parent_level}"),
        ):
            key = (source, target, edge_type)
            if key in seen:
                continue
            seen.add(key)
            records.append({
                "source": source,
                "target": target,
                "type": edge_type,
                "relation": relation,
            })
    return records


def write_jsonl(records: Iterable[Dict[str, Any]], file_path: Path) -> int:
    """レコードを JSONL 形式で出力し、件数を返す"""
    count = 0
    with open(file_path, "w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
            count += 1
    return count


class ReferenceWriter:
    """
    文書ごとの参照エッジ・包含エッジを出力する

    参照: {law_id}_{patch_id}.jsonl
    包含: {law_id}_{patch_id}.structure.jsonl（include_structure=True のとき）
    """

    def __init__(self, base: str = ELI_BASE_URI, include_structure: bool = False):
        self.base = base
        self.include_structure = include_structure

    @staticmethod
    def file_stem(document: LawDocument) -> str:
        return f"{document.law_id}_{document.patch_id or DEFAULT_PATCH_ID}"

    def write_document(
        self,
        document: LawDocument,
        refs: List[ResolvedReference],
        out_dir: Path,
    ) -> Optional[Path]:
        """
        参照が1件以上あればファイルに書き出す

        Returns:
            書き出した参照ファイルのパス、参照が無ければ None
        """
        out_dir.mkdir(parents=True, exist_ok=True)
        stem = self.file_stem(document)

        if self.include_structure:
            structure_path = out_dir / f"{stem}.structure.jsonl"
            write_jsonl(containment_records(document, self.base), structure_path)

        if not refs:
            logger.info(f"No references in {document.law_id}")
            return None

        path = out_dir / f"{stem}.jsonl"
        count = write_jsonl((reference_to_record(ref, self.base) for ref in refs), path)
        logger.info(f"Wrote {count} references to {path}")
        return path
