"""
Deposit distribution rules for an employee's bank account set.

An employee's net pay is split across up to five accounts. The first entry
decides how the split works:

    FULL        one account takes everything; nothing else is allowed
    PARTIAL     fixed amounts; the last account takes the remainder
    PERCENTAGE  percentages summing to 100, or a remainder account absorbs
                whatever the percentages leave
    REMAINDER   never allowed to lead

``validate_distribution`` checks the set in that order and returns
normalized copies of the entries (forced types, cleared values, computed
remainder). The caller's dicts are never modified.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation

from staffing_api.common.errors import DistributionError
from staffing_api.models.bank_account import DepositType

HUNDRED = Decimal("100")

MESSAGES = {
    "AtLeastOneAccountRequired": "At least one bank account is required",
    "FullPaymentOnlyOneAccount": "Full net payment can be configured for only one bank account",
    "FullNotAllowedWithPartial": "Full net payment is not allowed along with partial distributions",
    "MixedPartialPercentageNotAllowed": "Partial amount and partial percentage distributions cannot be combined",
    "PartialRequiresRemainder": "Partial distribution requires another bank account to receive the remainder",
    "PercentageRequiresRemainderOrTotal100": "Partial percentages must total 100 or include a remainder account",
    "PercentageExceeds100": "Partial percentages cannot exceed 100",
    "RemainderCannotBeStandalone": "Remainder distribution must follow a partial distribution",
}


def _error(key: str) -> DistributionError:
    return DistributionError(key, MESSAGES[key])


def to_decimal(value) -> Decimal:
    """Blank or missing values count as zero."""
    if value is None:
        return Decimal("0")
    text = str(value).strip()
    if not text:
        return Decimal("0")
    try:
        return Decimal(text)
    except InvalidOperation:
        return Decimal("0")


def format_decimal(value: Decimal) -> str:
    # 30.00 -> "30", 39.50 -> "39.5"
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def _type(entry) -> int:
    return int(entry.get("deposit_type"))


def _as_remainder(entry: dict) -> None:
    entry["deposit_type"] = int(DepositType.REMAINDER)
    entry["deposit_value"] = ""


def _clear_remainder_values(entries: list[dict], keep=None) -> None:
    for e in entries:
        if e is not keep and _type(e) == DepositType.REMAINDER:
            e["deposit_value"] = ""


def validate_distribution(entries) -> list[dict]:
    entries = [dict(e) for e in entries or []]

    if not entries:
        raise _error("AtLeastOneAccountRequired")

    # nothing to split: a lone non-partial account receives the full net pay
    if len(entries) == 1 and _type(entries[0]) != DepositType.PARTIAL:
        entries[0]["deposit_type"] = int(DepositType.FULL)
        entries[0]["deposit_value"] = ""

    leading = _type(entries[0])

    if leading == DepositType.FULL:
        if len(entries) > 1:
            raise _error("FullPaymentOnlyOneAccount")

    elif leading == DepositType.PARTIAL:
        if len(entries) == 1:
            raise _error("PartialRequiresRemainder")
        for e in entries:
            t = _type(e)
            if t == DepositType.FULL:
                raise _error("FullNotAllowedWithPartial")
            if t == DepositType.PERCENTAGE:
                raise _error("MixedPartialPercentageNotAllowed")
        _as_remainder(entries[-1])
        _clear_remainder_values(entries)

    elif leading == DepositType.PERCENTAGE:
        _apply_percentages(entries)

    elif leading == DepositType.REMAINDER:
        raise _error("RemainderCannotBeStandalone")

    return entries


def _apply_percentages(entries: list[dict]) -> None:
    for e in entries:
        t = _type(e)
        if t == DepositType.FULL:
            raise _error("FullNotAllowedWithPartial")
        if t == DepositType.PARTIAL:
            raise _error("MixedPartialPercentageNotAllowed")

    remainder = next((e for e in entries if _type(e) == DepositType.REMAINDER), None)

    if len(entries) == 1 and to_decimal(entries[0].get("deposit_value")) != HUNDRED and remainder is None:
        raise _error("PercentageRequiresRemainderOrTotal100")

    total = sum(
        (to_decimal(e.get("deposit_value")) for e in entries if _type(e) == DepositType.PERCENTAGE),
        Decimal("0"),
    )

    if total > 0 and total != HUNDRED:
        if remainder is None:
            raise _error("PercentageRequiresRemainderOrTotal100")
        if total > HUNDRED:
            raise _error("PercentageExceeds100")
        remainder["deposit_value"] = format_decimal(HUNDRED - total)
    elif total == 0:
        _as_remainder(entries[-1])

    computed = remainder if 0 < total < HUNDRED else None
    _clear_remainder_values(entries, keep=computed)
