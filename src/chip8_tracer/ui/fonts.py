"""
UIフォント管理モジュール。

レジスタ表示と逆アセンブル表示で使う等幅フォントを選択します。
"""
from PySide6.QtGui import QFont, QFontDatabase

# 優先順位: Consolas -> Menlo -> DejaVu Sans Mono -> Courier New
PREFERRED_MONOSPACE = ["Consolas", "Menlo", "DejaVu Sans Mono", "Courier New"]

# @intent:responsibility 現在のシステムで利用可能な最適な等幅フォントファミリー名を返します。
def get_monospace_font_family() -> str:
    available_families = set(QFontDatabase.families())
    for family in PREFERRED_MONOSPACE:
        if family in available_families:
            return family
    # Qtのシステムデフォルトの等幅フォント
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    font = QFont(get_monospace_font_family(), size)
    font.setStyleHint(QFont.Monospace)
    return font
