"""
API のレスポンスモデル
"""
from typing import Any, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    status_code: int = 200
    successful: bool = True
    message: str = ""
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "処理が完了しました") -> "ApiResponse":
        return cls(data=data, message=message)

    @classmethod
    def fail(cls, status_code: int, message: str) -> "ApiResponse":
        return cls(status_code=status_code, successful=False, message=message)


class ApiError(Exception):
    """ApiResponse 形式で返すエラー。"""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
