"""
declog の例外定義
"""


class Log10Error(Exception):
    """declog 関連のエラー"""
    pass


class Log10DomainError(Log10Error, ValueError):
    """入力値が関数の定義域外 (0 や型の最大値超え) の場合のエラー"""
    pass


class TableConstructionError(Log10Error):
    """テーブルの検証に失敗した場合のエラー (プログラミングミス)"""
    pass


class GpuNotAvailableError(Log10Error):
    """CUDAデバイスが利用できない場合のエラー"""
    pass


__all__ = [
    "Log10Error",
    "Log10DomainError",
    "TableConstructionError",
    "GpuNotAvailableError",
]
