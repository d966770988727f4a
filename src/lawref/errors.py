"""
lawref 例外定義

参照抽出のコア（core.extractor 以下）は例外を送出しない。
ここで定義する例外は文書の読み込みや法令名テーブルの読み込みなど、
周辺の処理で使用する。
"""


class LawrefError(Exception):
    """lawref の基底例外"""


class DocumentParseError(LawrefError):
    """e-Gov 法令データ（JSON/XML）を構造化できない"""


class LawTableError(LawrefError):
    """法令名テーブル（CSV）の形式が不正"""
