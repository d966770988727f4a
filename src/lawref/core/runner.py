"""
複数文書の一括処理

文書ごとに 読み込み → 参照抽出 → 書き出し を行う。文書間で状態を共有しないので、
ProcessPoolExecutor で文書単位に並列化する。法令名テーブルは各ワーカーの
起動時に一度だけ渡す。
"""
import json
import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml
from tqdm import tqdm

from .document import LawDocument
from .extractor import extract_references
from .law_table import LawNameTable
from .output import ReferenceWriter
from ..client.egov import EGovClient

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".json", ".xml")

# ワーカープロセスごとの状態（_init_worker で設定）
_worker_table: Optional[LawNameTable] = None
_worker_writer: Optional[ReferenceWriter] = None


def load_targets(path: Path) -> List[str]:
    """
    targets.yaml から法令IDのリストを読み込む

    リスト形式と {"targets": [...]} 形式の両方に対応する。
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if isinstance(data, list):
        return [str(t) for t in data]
    if isinstance(data, dict) and "targets" in data:
        return [str(t) for t in data["targets"]]
    return []


def collect_sources(input_dir: Path) -> List[Path]:
    """入力ディレクトリ内の法令データ（.json / .xml）をファイル名順に列挙"""
    return sorted(
        p for p in input_dir.iterdir()
        if p.is_file() and p.suffix.lower() in SOURCE_SUFFIXES
    )


def fetch_targets(law_ids: Iterable[str], dest_dir: Path, client: Optional[EGovClient] = None) -> List[Path]:
    """
    e-Gov API v2 から法令データを取得して dest_dir に保存

    ファイル名は法令履歴ID（{法令ID}_{施行日}_{改正法令ID}.json）。
    取得できなかった法令は警告を出して飛ばす。
    """
    client = client or EGovClient()
    dest_dir.mkdir(parents=True, exist_ok=True)
    saved: List[Path] = []
    for law_id in law_ids:
        data = client.fetch_law_data(law_id)
        if not data:
            logger.warning(f"No law data for {law_id}, skipping.")
            continue
        revision_id = (data.get("revision_info") or {}).get("law_revision_id") or law_id
        path = dest_dir / f"{revision_id}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        saved.append(path)
    return saved


def process_document(
    source: Path,
    table: LawNameTable,
    out_dir: Path,
    writer: Optional[ReferenceWriter] = None,
) -> Dict[str, Any]:
    """
    一つの文書を処理する

    Returns:
        {"id": 法令ID, "source": ファイル名, "references": 件数, "output": 出力パス or None}

    Raises:
        DocumentParseError: 文書を構造化できない
    """
    writer = writer or ReferenceWriter()
    document = LawDocument.load(source)
    refs = extract_references(document.ordered_paragraphs(), table)
    path = writer.write_document(document, refs, out_dir)
    logger.info(f"{document.law_id}: {len(refs)} references")
    return {
        "id": document.law_id,
        "source": source.name,
        "references": len(refs),
        "output": str(path) if path else None,
    }


def _init_worker(table: LawNameTable, writer: ReferenceWriter):
    global _worker_table, _worker_writer
    _worker_table = table
    _worker_writer = writer


def _process_in_worker(source: Path, out_dir: Path) -> Dict[str, Any]:
    return process_document(source, _worker_table, out_dir, _worker_writer)


def run_batch(
    sources: List[Path],
    table: LawNameTable,
    out_dir: Path,
    jobs: int = 1,
    writer: Optional[ReferenceWriter] = None,
) -> Dict[str, Any]:
    """
    複数の文書を処理し、out_dir/report.json に結果を書き出す

    文書ごとの失敗はログに記録して report の failed に入れ、処理は続ける。

    Returns:
        report（total_sources, success, failed, timestamp）
    """
    writer = writer or ReferenceWriter()
    out_dir.mkdir(parents=True, exist_ok=True)
    report: Dict[str, Any] = {
        "total_sources": len(sources),
        "success": [],
        "failed": [],
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }

    if jobs <= 1:
        for source in tqdm(sources, desc="Extracting references"):
            try:
                report["success"].append(process_document(source, table, out_dir, writer))
            except Exception as e:
                logger.error(f"Failed to process {source.name}: {e}")
                report["failed"].append({"id": source.name, "error": str(e)})
    else:
        with ProcessPoolExecutor(
            max_workers=jobs,
            initializer=_init_worker,
            initargs=(table, writer),
        ) as executor:
            futures = {
                executor.submit(_process_in_worker, source, out_dir): source
                for source in sources
            }
            for future in tqdm(as_completed(futures), total=len(futures), desc="Extracting references"):
                source = futures[future]
                try:
                    report["success"].append(future.result())
                except Exception as e:
                    logger.error(f"Failed to process {source.name}: {e}")
                    report["failed"].append({"id": source.name, "error": str(e)})
        # 完了順ではなく入力順に並べる
        order = {source.name: i for i, source in enumerate(sources)}
        report["success"].sort(key=lambda r: order[r["source"]])
        report["failed"].sort(key=lambda r: order[r["id"]])

    with open(out_dir / "report.json", "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False)

    logger.info(f"Processed {len(report['success'])} documents, {len(report['failed'])} failed")
    return report
