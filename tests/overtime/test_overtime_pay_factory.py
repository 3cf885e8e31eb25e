from datetime import date
from decimal import Decimal

from src.bizledger.bizledger.overtime.factory import OvertimePayStrategyFactory
from src.bizledger.bizledger.overtime.model import OvertimePressRecord, OvertimeRecord
from src.bizledger.bizledger.overtime.strategies.hourly_strategy import HourlyStrategy
from src.bizledger.bizledger.overtime.strategies.pool_share_strategy import PoolShareStrategy


def test_regular_overtime_is_paid_hourly():
    record = OvertimeRecord(id="OT-1", employee_id="E", date=date(2024, 1, 1), hours=Decimal("2.5"))
    strategy = OvertimePayStrategyFactory().for_record(record)

    assert isinstance(strategy, HourlyStrategy)
    assert strategy.pay(record) == Decimal("17.5")


def test_press_record_with_pool_amount_is_paid_the_amount():
    record = OvertimePressRecord(
        id="OTP-1", employee_id="E", date=date(2024, 1, 1), hours=Decimal("3"), amount=Decimal("25")
    )
    strategy = OvertimePayStrategyFactory().for_record(record)

    assert isinstance(strategy, PoolShareStrategy)
    assert strategy.pay(record) == Decimal("25")


def test_press_record_with_zero_amount_falls_back_to_hours():
    record = OvertimePressRecord(
        id="OTP-1", employee_id="E", date=date(2024, 1, 1), hours=Decimal("3"), amount=Decimal("0")
    )
    strategy = OvertimePayStrategyFactory().for_record(record)

    assert isinstance(strategy, HourlyStrategy)
    assert strategy.pay(record) == Decimal("21")
