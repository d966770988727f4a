"""
e-Gov 法令データの構造化

e-Gov API v2 の JSON ツリー（{"tag", "attr", "children"}）を traverse して、
本則（MainProvision）の目次（編・章・節・款・目・条）と段落の一覧を作る。
XML で保存された法令データは同じ形のツリーに変換してから扱う。
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import date as Date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .locator import LawType, Locator, sort_locators
from ..errors import DocumentParseError
from ..utils.numerals import ArticleNumber

logger = logging.getLogger(__name__)

# 元号 → 元年の西暦
ERA_BASE_YEARS: Dict[str, int] = {
    "Meiji": 1868,
    "Taisho": 1912,
    "Showa": 1926,
    "Heisei": 1989,
    "Reiwa": 2019,
}

# 構造ノードのタグ → Locator のフィールド
STRUCTURE_TAGS: Dict[str, str] = {
    "Part": "part",
    "Chapter": "chapter",
    "Section": "section",
    "Subsection": "subsection",
    "Division": "division",
}


# =============================================================================
# JSON Tree Traversal Helpers
# =============================================================================

def find_child(node: Dict[str, Any], tag: str) -> Optional[Dict[str, Any]]:
    """指定タグの最初の子要素を取得"""
    if not isinstance(node, dict):
        return None
    for child in node.get("children", []):
        if isinstance(child, dict) and child.get("tag") == tag:
            return child
    return None


def find_children(node: Dict[str, Any], tag: str) -> List[Dict[str, Any]]:
    """指定タグの全子要素を取得"""
    if not isinstance(node, dict):
        return []
    return [
        child for child in node.get("children", [])
        if isinstance(child, dict) and child.get("tag") == tag
    ]


def find_all_recursive(node: Dict[str, Any], tag: str) -> List[Dict[str, Any]]:
    """指定タグの要素を再帰的に全て取得"""
    results = []
    if not isinstance(node, dict):
        return results
    if node.get("tag") == tag:
        results.append(node)
    for child in node.get("children", []):
        if isinstance(child, dict):
            results.extend(find_all_recursive(child, tag))
    return results


def get_text(node: Any) -> str:
    """ノード内の全テキストを再帰的に取得"""
    if isinstance(node, str):
        return node
    if not isinstance(node, dict):
        return ""
    return "".join(get_text(child) for child in node.get("children", []))


def get_attr(node: Dict[str, Any], key: str, default: str = "") -> str:
    """ノードの属性値を取得"""
    if not isinstance(node, dict):
        return default
    return node.get("attr", {}).get(key, default)


def paragraph_text(paragraph: Dict[str, Any]) -> str:
    """Paragraph 内の全 Sentence のテキスト（Item 内を含む）"""
    return "".join(get_text(s) for s in find_all_recursive(paragraph, "Sentence"))


# =============================================================================
# XML → JSON Tree
# =============================================================================

def _element_to_node(element: Tag) -> Dict[str, Any]:
    children: List[Any] = []
    for child in element.children:
        if isinstance(child, Tag):
            children.append(_element_to_node(child))
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # インデント等の空白だけのテキストノードは捨てる
            if str(child).strip():
                children.append(str(child))
    return {"tag": element.name, "attr": dict(element.attrs), "children": children}


def xml_to_tree(xml_content: str) -> Dict[str, Any]:
    """
    e-Gov 法令 XML を v2 API と同じ形の JSON ツリーに変換

    Raises:
        DocumentParseError: Law 要素が無い
    """
    soup = BeautifulSoup(xml_content, "xml")
    law = soup.find("Law")
    if law is None:
        raise DocumentParseError("No <Law> element found in XML")
    return _element_to_node(law)


# =============================================================================
# 識別子
# =============================================================================

def split_revision_id(revision_id: str) -> Tuple[str, Optional[str]]:
    """
    e-Gov の法令履歴ID（ファイル名）から (法令ID, 改正法令ID) を取り出す

    Examples:
        >>> split_revision_id('129AC0000000089_20250601_505AC0000000053')
        ('129AC0000000089', '505AC0000000053')
        >>> split_revision_id('129AC0000000089')
        ('129AC0000000089', None)
    """
    parts = revision_id.split("_")
    if len(parts) >= 3 and parts[2]:
        return parts[0], parts[2]
    return parts[0], None


def promulgation_date(law: Dict[str, Any]) -> Optional[Date]:
    """Law 要素の Era / Year / PromulgateMonth / PromulgateDay から公布日を求める"""
    base = ERA_BASE_YEARS.get(get_attr(law, "Era"))
    try:
        year = int(get_attr(law, "Year"))
        month = int(get_attr(law, "PromulgateMonth"))
        day = int(get_attr(law, "PromulgateDay"))
    except ValueError:
        return None
    if base is None:
        return None
    try:
        return Date(base + year - 1, month, day)
    except ValueError:
        logger.warning(f"Invalid promulgation date: {get_attr(law, 'Era')} {year}/{month}/{day}")
        return None


# =============================================================================
# LawDocument
# =============================================================================

@dataclass
class LawDocument:
    """
    構造化済みの法令文書

    - root: 法令全体の Locator
    - toc: 編・章・節・款・目・条 の Locator（文書順）
    - paragraphs: 段落テキスト付きの段落 Locator（文書順）
    """
    root: Locator
    toc: List[Locator] = field(default_factory=list)
    paragraphs: List[Locator] = field(default_factory=list)

    @property
    def law_id(self) -> str:
        return self.root.law_id

    @property
    def patch_id(self) -> Optional[str]:
        return self.root.patch_id

    def ordered_paragraphs(self) -> List[Tuple[Locator, str]]:
        """参照抽出に渡す (段落, テキスト) を Locator の順に並べたもの"""
        return [
            (p, p.paragraph_text)
            for p in sort_locators(self.paragraphs)
            if p.paragraph_text is not None
        ]

    def containment_edges(self) -> List[Tuple[Locator, Locator]]:
        """(親, 子) の組。目次と段落のそれぞれについて一つ上の区画を親とする"""
        return [(node.parent(), node) for node in self.toc + self.paragraphs]

    @classmethod
    def from_tree(
        cls,
        tree: Dict[str, Any],
        law_id: str,
        name: Optional[str] = None,
        patch_id: Optional[str] = None,
    ) -> "LawDocument":
        """
        v2 JSON ツリーから生成

        Raises:
            DocumentParseError: LawBody / MainProvision が無い
        """
        law_body = find_child(tree, "LawBody")
        if not law_body:
            raise DocumentParseError(f"No LawBody found for {law_id}")
        main_provision = find_child(law_body, "MainProvision")
        if not main_provision:
            raise DocumentParseError(f"No MainProvision found for {law_id}")

        if name is None:
            title_node = find_child(law_body, "LawTitle")
            name = get_text(title_node) if title_node else None
        law_num_node = find_child(tree, "LawNum")
        law_num = get_text(law_num_node) if law_num_node else ""

        law_type_attr = get_attr(tree, "LawType")
        if law_type_attr:
            law_type = LawType.from_egov(law_type_attr)
        else:
            law_type = LawType.from_law_id(law_id) or LawType.from_law_num(law_num)

        root = Locator(
            law_id=law_id,
            law_num=law_num,
            law_type=law_type,
            name=name,
            date=promulgation_date(tree),
            patch_id=patch_id,
        )
        document = cls(root=root)
        document._walk(main_provision, root)
        logger.debug(
            f"Structured {law_id}: {len(document.toc)} toc entries, "
            f"{len(document.paragraphs)} paragraphs"
        )
        return document

    def _walk(self, node: Dict[str, Any], current: Locator):
        for child in node.get("children", []):
            if not isinstance(child, dict):
                continue
            tag = child.get("tag")
            if tag in STRUCTURE_TAGS:
                num = ArticleNumber.from_num_attr(get_attr(child, "Num"))
                if num is None:
                    logger.debug(f"Skip {tag} without numeric Num in {self.law_id}")
                    continue
                structure = current.with_numbers(**{STRUCTURE_TAGS[tag]: num})
                self.toc.append(structure)
                self._walk(child, structure)
            elif tag == "Article":
                self._add_article(child, current)
            elif tag == "Paragraph":
                # 条の無い段落（前文的なもの）
                self._add_paragraph(child, current)

    def _add_article(self, article: Dict[str, Any], current: Locator):
        num = ArticleNumber.from_num_attr(get_attr(article, "Num"))
        if num is None:
            logger.debug(f"Skip Article without numeric Num in {self.law_id}")
            return
        located = current.with_numbers(article=num)
        self.toc.append(located)
        for para in find_children(article, "Paragraph"):
            self._add_paragraph(para, located)

    def _add_paragraph(self, para: Dict[str, Any], current: Locator):
        num = ArticleNumber.from_num_attr(get_attr(para, "Num", "1") or "1")
        if num is None:
            return
        self.paragraphs.append(current.with_paragraph(num, paragraph_text(para)))

    @classmethod
    def load(cls, path: Path, name: Optional[str] = None) -> "LawDocument":
        """
        ファイルから読み込む

        - *.json: v2 API の law_data レスポンス、または law_full_text のツリーそのもの
        - *.xml: e-Gov 法令 XML
        ファイル名（拡張子を除く）を法令履歴IDとして法令ID・改正法令IDを取り出す。

        Raises:
            DocumentParseError: 読み込み・構造化に失敗
        """
        law_id, patch_id = split_revision_id(path.stem)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentParseError(f"Cannot read {path}: {e}") from e

        if path.suffix.lower() == ".xml":
            tree = xml_to_tree(content)
        else:
            try:
                data = json.loads(content)
            except json.JSONDecodeError as e:
                raise DocumentParseError(f"Invalid JSON in {path}: {e}") from e
            if not isinstance(data, dict):
                raise DocumentParseError(f"Unexpected JSON root in {path}")
            if "law_full_text" in data:
                revision = data.get("revision_info") or {}
                revision_id = revision.get("law_revision_id")
                if revision_id:
                    law_id, patch_id = split_revision_id(revision_id)
                if name is None:
                    name = revision.get("law_title")
                tree = data["law_full_text"]
            else:
                tree = data

        return cls.from_tree(tree, law_id=law_id, name=name, patch_id=patch_id)
