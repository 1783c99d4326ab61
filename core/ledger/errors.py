"""
Ledger 예외 정의

경계 레이어(HTTP)가 상태 코드를 고를 수 있도록
모든 도메인 예외는 kind 문자열을 가진다.
원인 예외는 `raise ... from e`로 __cause__에 보존.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    kind: str = "LedgerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str | None]:
        """경계 레이어 직렬화용 (kind, message, cause)"""
        cause = self.__cause__
        return {
            "kind": self.kind,
            "message": self.message,
            "cause": f"{type(cause).__name__}: {cause}" if cause is not None else None,
        }


class ValidationError(LedgerError):
    """입력 데이터가 도메인 불변식을 위반 (불균형 분개, 빈 분개 등)"""

    kind = "ValidationError"


class NotFound(LedgerError):
    """참조한 계정/거래가 존재하지 않음"""

    kind = "NotFound"


class StoreError(LedgerError):
    """저장소 실패 (I/O, 분류되지 않은 제약 위반, 손상)"""

    kind = "StoreError"


class PoolExhausted(LedgerError):
    """제한 시간 내에 사용 가능한 연결 없음"""

    kind = "PoolExhausted"
