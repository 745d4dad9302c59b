"""符号なし固定幅整数の型定義と UIntWidth データクラス"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Union

import numpy as np

@dataclass(frozen=True)
class UIntWidth:
    """符号なし整数型 1 種類分の情報をまとめた不変データクラス"""
    name: str
    bits: int
    dtype: Optional[np.dtype]   # numpy に対応する型が無い場合 (u128) は None
    packed_shift: int           # パックテーブルの結果部分を取り出すシフト量

    @property
    def max_value(self) -> int:
        """この型で表現できる最大値"""
        return (1 << self.bits) - 1

    @property
    def has_dtype(self) -> bool:
        return self.dtype is not None

    def __str__(self) -> str:
        return self.name

# パックテーブルは 32bit 以下の型では 32bit シフト (u64 エントリに収まる)、
# それより広い型ではビット幅と同じシフトを使う
U8 = UIntWidth("u8", 8, np.dtype(np.uint8), 32)
U16 = UIntWidth("u16", 16, np.dtype(np.uint16), 32)
U32 = UIntWidth("u32", 32, np.dtype(np.uint32), 32)
U64 = UIntWidth("u64", 64, np.dtype(np.uint64), 64)
U128 = UIntWidth("u128", 128, None, 128)

ALL_WIDTHS = (U8, U16, U32, U64, U128)

# ビット幅 → UIntWidth マッピング表
WIDTH_BY_BITS: Dict[int, UIntWidth] = {w.bits: w for w in ALL_WIDTHS}

# 型名 → UIntWidth マッピング表
WIDTH_BY_NAME: Dict[str, UIntWidth] = {w.name: w for w in ALL_WIDTHS}

# numpy dtype → UIntWidth マッピング表
WIDTH_BY_DTYPE: Dict[np.dtype, UIntWidth] = {
    w.dtype: w for w in ALL_WIDTHS if w.dtype is not None
}

WidthLike = Union[UIntWidth, int, str, np.dtype, type]


def resolve_width(width: WidthLike) -> UIntWidth:
    """
    UIntWidth / ビット幅 / 型名 / numpy dtype のいずれかから UIntWidth を得る

    Raises:
        ValueError: 未対応の幅が指定された場合
    """
    if isinstance(width, UIntWidth):
        return width
    if isinstance(width, bool):
        raise ValueError(f"未対応の整数幅: {width!r}")
    if isinstance(width, int):
        if width in WIDTH_BY_BITS:
            return WIDTH_BY_BITS[width]
        raise ValueError(f"未対応のビット幅: {width}")
    if isinstance(width, str) and width in WIDTH_BY_NAME:
        return WIDTH_BY_NAME[width]
    try:
        dtype = np.dtype(width)
    except TypeError:
        raise ValueError(f"未対応の整数幅: {width!r}") from None
    if dtype in WIDTH_BY_DTYPE:
        return WIDTH_BY_DTYPE[dtype]
    raise ValueError(f"未対応の整数幅: {width!r}")


__all__ = [
    "UIntWidth", "U8", "U16", "U32", "U64", "U128", "ALL_WIDTHS",
    "WIDTH_BY_BITS", "WIDTH_BY_NAME", "WIDTH_BY_DTYPE",
    "WidthLike", "resolve_width",
]
