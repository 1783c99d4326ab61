"""분개 검증 테스트 (DB 접근 없음)"""

from datetime import date, datetime

import pytest

from core.ledger.errors import ValidationError
from core.ledger.store import MAX_AMOUNT, validate_postings
from core.ledger.types import NewPosting

D = date(2026, 3, 1)


def _posting(account_id: int, amount: int) -> NewPosting:
    return NewPosting(account_id=account_id, amount=amount, date=D)


class TestValidatePostings:
    """validate_postings 테스트"""

    def test_balanced_pair(self) -> None:
        """균형 잡힌 2개 분개"""
        lines = validate_postings([_posting(1, 1000), _posting(2, -1000)])

        assert len(lines) == 2

    def test_balanced_split(self) -> None:
        """3개 이상 분개 (분할 거래)"""
        lines = validate_postings(
            [_posting(1, 1000), _posting(2, -600), _posting(3, -400)]
        )

        assert [line.amount for line in lines] == [1000, -600, -400]

    def test_accepts_tuple(self) -> None:
        assert validate_postings((_posting(1, 5), _posting(2, -5)))

    def test_empty(self) -> None:
        """빈 분개"""
        with pytest.raises(ValidationError, match="at least two"):
            validate_postings([])

    def test_single_posting(self) -> None:
        """분개 1개는 복식부기가 아님"""
        with pytest.raises(ValidationError, match="at least two"):
            validate_postings([_posting(1, 0)])

    def test_unbalanced(self) -> None:
        """합계 != 0"""
        with pytest.raises(ValidationError, match="sum to 1"):
            validate_postings([_posting(1, 1000), _posting(2, -999)])

    def test_float_amount_rejected(self) -> None:
        """부동소수점 금액 불가"""
        with pytest.raises(ValidationError, match="integer"):
            validate_postings(
                [
                    NewPosting(account_id=1, amount=10.5, date=D),  # type: ignore[arg-type]
                    NewPosting(account_id=2, amount=-10.5, date=D),  # type: ignore[arg-type]
                ]
            )

    def test_bool_amount_rejected(self) -> None:
        with pytest.raises(ValidationError, match="integer"):
            validate_postings(
                [
                    NewPosting(account_id=1, amount=True, date=D),
                    NewPosting(account_id=2, amount=-1, date=D),
                ]
            )

    def test_out_of_range_amount(self) -> None:
        with pytest.raises(ValidationError, match="range"):
            validate_postings([_posting(1, MAX_AMOUNT + 1), _posting(2, -(MAX_AMOUNT + 1))])

    def test_out_of_range_account_id(self) -> None:
        with pytest.raises(ValidationError, match="account_id out of range"):
            validate_postings([_posting(2**63, 10), _posting(2, -10)])

    def test_datetime_rejected(self) -> None:
        """date 대신 datetime 불가"""
        with pytest.raises(ValidationError, match="calendar date"):
            validate_postings(
                [
                    NewPosting(account_id=1, amount=1, date=datetime(2026, 3, 1, 12)),
                    _posting(2, -1),
                ]
            )

    def test_string_date_rejected(self) -> None:
        with pytest.raises(ValidationError, match="calendar date"):
            validate_postings(
                [
                    NewPosting(account_id=1, amount=1, date="2026-03-01"),  # type: ignore[arg-type]
                    _posting(2, -1),
                ]
            )

    def test_non_posting_item(self) -> None:
        with pytest.raises(ValidationError, match="NewPosting"):
            validate_postings([{"account_id": 1, "amount": 1}, _posting(2, -1)])  # type: ignore[list-item]

    def test_none(self) -> None:
        with pytest.raises(ValidationError, match="sequence"):
            validate_postings(None)  # type: ignore[arg-type]
