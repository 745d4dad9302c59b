"""
declog - 除算なしの整数 log10

floor(log2(x)) ベースの推定 + 補正と、パック定数テーブルによる分岐なし計算
"""

from .array_log10 import log10_floor_array, log10_floor_wide_array
from .errors import GpuNotAvailableError, Log10DomainError, Log10Error, TableConstructionError
from .log10 import log10_floor, log10_floor_split, log10_floor_wide
from .tables import Log10Tables, get_tables, verify_all_tables, verify_tables
from .types import U8, U16, U32, U64, U128, UIntWidth, resolve_width

__version__ = "0.1.0"

__all__ = [
    # スカラー版
    "log10_floor",
    "log10_floor_wide",
    "log10_floor_split",
    # 配列版
    "log10_floor_array",
    "log10_floor_wide_array",
    # テーブル
    "Log10Tables",
    "get_tables",
    "verify_tables",
    "verify_all_tables",
    # 型
    "UIntWidth",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "resolve_width",
    # 例外
    "Log10Error",
    "Log10DomainError",
    "TableConstructionError",
    "GpuNotAvailableError",
]
