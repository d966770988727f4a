"""
法令名テーブル

法令名（現行名・旧名）と法令番号の文字列から、その法令の Locator を引く。
テーブルは CSV で保存し、e-Gov の法令一覧（lawlists）から作成できる。
"""
import csv
import logging
from datetime import date as Date
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from .locator import LawType, Locator
from ..errors import LawTableError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("law_id", "law_name", "law_num")
CSV_COLUMNS = REQUIRED_COLUMNS + ("law_type", "promulgation_date", "old_names")

OLD_NAME_SEPARATOR = ";"

_LAW_TYPE_VALUES = {t.value for t in LawType}


def parse_date(value: Optional[str]) -> Optional[Date]:
    """
    YYYY-MM-DD または YYYYMMDD を日付に変換

    Examples:
        >>> parse_date('1968-06-15')
        datetime.date(1968, 6, 15)
        >>> parse_date('19680615')
        datetime.date(1968, 6, 15)
        >>> parse_date('') is None
        True
    """
    if not value:
        return None
    value = value.strip()
    for fmt in ("%Y-%m-%d", "%Y%m%d"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    logger.warning(f"Unrecognized date format: {value}")
    return None


class LawNameTable(Mapping[str, Locator]):
    """
    法令名・法令番号 → 法令の Locator

    登録順を保持する（テキスト検索はこの順に行われる）。
    同じ名前が複数の法令に登録された場合は後の登録で上書きする。
    """

    def __init__(self):
        self._entries: Dict[str, Locator] = {}
        self._laws: Dict[str, Locator] = {}

    def __getitem__(self, name: str) -> Locator:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def laws(self) -> List[Locator]:
        """登録された法令（法令IDごとに1つ）"""
        return list(self._laws.values())

    def get_law(self, law_id: str) -> Optional[Locator]:
        return self._laws.get(law_id)

    def add_law(self, law: Locator, old_names: Iterable[str] = ()):
        """法令名・旧名・法令番号をキーとして登録"""
        self._laws[law.law_id] = law
        keys = [law.name, *old_names, law.law_num]
        for key in keys:
            if not key:
                continue
            existing = self._entries.get(key)
            if existing is not None and existing.law_id != law.law_id:
                logger.debug(f"Name '{key}' re-registered: {existing.law_id} -> {law.law_id}")
            self._entries[key] = law

    # =========================================================================
    # 読み込み
    # =========================================================================

    @classmethod
    def from_csv(cls, path: Path) -> "LawNameTable":
        """
        CSV から読み込む

        Raises:
            LawTableError: 必須列が無い
        """
        table = cls()
        with open(path, "r", encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise LawTableError(f"{path}: missing column(s) {', '.join(missing)}")
            for row in reader:
                law_id = (row.get("law_id") or "").strip()
                if not law_id:
                    continue
                law_num = (row.get("law_num") or "").strip()
                law_type_value = (row.get("law_type") or "").strip()
                law_type = LawType(law_type_value) if law_type_value in _LAW_TYPE_VALUES \
                    else LawType.from_law_num(law_num)
                law = Locator(
                    law_id=law_id,
                    law_num=law_num,
                    law_type=law_type,
                    name=(row.get("law_name") or "").strip() or None,
                    date=parse_date(row.get("promulgation_date")),
                )
                old_names = [
                    n.strip() for n in (row.get("old_names") or "").split(OLD_NAME_SEPARATOR)
                    if n.strip()
                ]
                table.add_law(law, old_names)

        logger.info(f"Loaded {len(table.laws)} laws ({len(table)} names) from {path}")
        return table

    @classmethod
    def from_law_list(cls, entries: Iterable[Mapping[str, Any]]) -> "LawNameTable":
        """e-Gov 法令一覧（LawId, LawName, LawNo, PromulgationDate）から作成"""
        table = cls()
        for entry in entries:
            law_id = entry.get("LawId")
            if not law_id:
                continue
            law_num = entry.get("LawNo") or ""
            table.add_law(Locator(
                law_id=law_id,
                law_num=law_num,
                law_type=LawType.from_law_num(law_num),
                name=entry.get("LawName") or None,
                date=parse_date(entry.get("PromulgationDate")),
            ))
        return table

    # =========================================================================
    # 書き出し
    # =========================================================================

    def write_csv(self, path: Path):
        """法令ごとに1行の CSV を書き出す（旧名は法令名・法令番号以外のキー）"""
        old_names: Dict[str, List[str]] = {law_id: [] for law_id in self._laws}
        for key, law in self._entries.items():
            registered = self._laws[law.law_id]
            if key not in (registered.name, registered.law_num):
                old_names[law.law_id].append(key)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
            writer.writeheader()
            for law in self._laws.values():
                writer.writerow({
                    "law_id": law.law_id,
                    "law_name": law.name or "",
                    "law_num": law.law_num,
                    "law_type": law.law_type.value,
                    "promulgation_date": law.date.isoformat() if law.date else "",
                    "old_names": OLD_NAME_SEPARATOR.join(old_names[law.law_id]),
                })
        logger.info(f"Wrote {len(self._laws)} laws to {path}")

