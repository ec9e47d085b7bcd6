"""
Input normalization and validation rules.

Leaf checks used by the service validation pipelines. ``is_valid_*`` helpers
return booleans; ``validate_*`` helpers normalize their input and raise
ValidationException on the first rule the value breaks. The ``optional_*``
variants are used for listing filters, where a blank value means "no filter".
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Optional, Tuple, TypeVar, Union
from uuid import UUID

from .domain.entities import OrderStatus
from .domain.exceptions import ValidationException

# Validation patterns
EMAIL_PATTERN = re.compile(
    r"^[_A-Za-z0-9\-+]+(\.[_A-Za-z0-9\-]+)*@[A-Za-z0-9\-]+(\.[A-Za-z0-9]+)*(\.[A-Za-z]{2,})$"
)
SKU_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
NON_DIGIT_PATTERN = re.compile(r"\D")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Field constraints
MIN_NAME_LENGTH = 4
SKU_LENGTH = 8
CPF_LENGTH = 11

N = TypeVar("N", int, float)
Moment = TypeVar("Moment", date, datetime)


def normalize_spaces(value: Optional[str]) -> Optional[str]:
    """Trim a string and collapse runs of whitespace into a single space."""
    if value is None:
        return None
    return WHITESPACE_PATTERN.sub(" ", value).strip()


def remove_all_spaces(value: Optional[str]) -> Optional[str]:
    """Remove every whitespace character from a string."""
    if value is None:
        return None
    return WHITESPACE_PATTERN.sub("", value)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def normalize_cpf(cpf: Optional[str]) -> str:
    """
    Strip every non-digit and left-pad with zeros up to 11 digits.

    Longer inputs are returned unchanged so the length check can reject them.
    """
    digits = NON_DIGIT_PATTERN.sub("", cpf or "")
    return digits.zfill(CPF_LENGTH) if digits else ""


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(digit) * (weight - index) for index, digit in enumerate(digits))
    check = 11 - (total % 11)
    return 0 if check >= 10 else check


def is_valid_cpf(cpf: Optional[str]) -> bool:
    """
    Validate a Brazilian CPF number.

    The number is normalized first. Eleven identical digits are rejected even
    though their check digits add up.

    Args:
        cpf: CPF string, with or without punctuation

    Returns:
        True if both check digits match
    """
    digits = normalize_cpf(cpf)
    if len(digits) != CPF_LENGTH or len(set(digits)) == 1:
        return False

    first = _cpf_check_digit(digits[:9])
    second = _cpf_check_digit(digits[:10])
    return digits[9:] == f"{first}{second}"


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(EMAIL_PATTERN.match(email))


def is_valid_sku(sku: Optional[str]) -> bool:
    if not sku:
        return False
    return len(sku) == SKU_LENGTH and bool(SKU_PATTERN.match(sku))


def _require(field: str, value: Any) -> None:
    if is_blank(value):
        raise ValidationException(field, value, "is required")


def validate_name(name: Optional[str], field: str = "name") -> str:
    _require(field, name)
    normalized = normalize_spaces(name)
    if len(normalized) < MIN_NAME_LENGTH:
        raise ValidationException(
            field, normalized, f"must have more than {MIN_NAME_LENGTH - 1} characters"
        )
    return normalized


def validate_email(email: Optional[str]) -> str:
    _require("email", email)
    normalized = remove_all_spaces(email)
    if not is_valid_email(normalized):
        raise ValidationException("email", normalized, "is not a valid email address")
    return normalized


def validate_cpf(cpf: Optional[str]) -> str:
    _require("cpf", cpf)
    digits = normalize_cpf(cpf)
    if len(digits) != CPF_LENGTH:
        raise ValidationException("cpf", cpf, f"must have {CPF_LENGTH} digits")
    if not is_valid_cpf(digits):
        raise ValidationException("cpf", cpf, "check digits do not match")
    return digits


def validate_sku(sku: Optional[str]) -> str:
    _require("sku", sku)
    normalized = remove_all_spaces(sku)
    if len(normalized) != SKU_LENGTH:
        raise ValidationException("sku", normalized, f"must have exactly {SKU_LENGTH} characters")
    if not SKU_PATTERN.match(normalized):
        raise ValidationException("sku", normalized, "must contain only letters and digits")
    return normalized


def validate_birth_date(birth_date: Optional[date], today: date) -> date:
    _require("birth_date", birth_date)
    if birth_date > today:
        raise ValidationException("birth_date", birth_date, "cannot be in the future")
    return birth_date


def validate_expiration_date(expiration_date: Optional[date], today: date) -> date:
    _require("expiration_date", expiration_date)
    if expiration_date < today:
        raise ValidationException("expiration_date", expiration_date, "cannot be in the past")
    return expiration_date


def validate_positive(field: str, value: Optional[N]) -> N:
    _require(field, value)
    if value <= 0:
        raise ValidationException(field, value, "must be greater than zero")
    return value


def _require_number(field: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationException(field, value, "must be a number")


def validate_whole_number(field: str, value: Any) -> int:
    """Require a positive integral value; 3.0 is accepted, 0.5 and True are not."""
    _require(field, value)
    _require_number(field, value)
    if isinstance(value, float) and not value.is_integer():
        raise ValidationException(field, value, "must be a whole number")
    return int(validate_positive(field, value))


def validate_price(price: Optional[float]) -> float:
    _require("price", price)
    _require_number("price", price)
    return float(validate_positive("price", price))


def validate_quantity(quantity: Optional[int]) -> int:
    return validate_whole_number("quantity", quantity)


def parse_status(status: Union[OrderStatus, str, None]) -> OrderStatus:
    """
    Parse an order status name.

    Matching is case-insensitive and ignores any whitespace.

    Raises:
        ValidationException: If the status is blank or not a known status
    """
    if isinstance(status, OrderStatus):
        return status
    _require("status", status)
    normalized = remove_all_spaces(status).upper()
    try:
        return OrderStatus(normalized)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationException("status", status, f"must be one of {allowed}") from None


def parse_uuid(field: str, value: Union[UUID, str, None]) -> UUID:
    _require(field, value)
    if isinstance(value, UUID):
        return value
    try:
        return UUID(remove_all_spaces(str(value)))
    except ValueError:
        raise ValidationException(field, value, "is not a valid identifier") from None


def parse_int_id(field: str, value: Union[int, str, None]) -> int:
    _require(field, value)
    if isinstance(value, bool):
        raise ValidationException(field, value, "is not a valid identifier")
    try:
        parsed = int(remove_all_spaces(str(value)))
    except ValueError:
        raise ValidationException(field, value, "is not a valid identifier") from None
    if parsed <= 0:
        raise ValidationException(field, value, "is not a valid identifier")
    return parsed


def optional_text(value: Optional[str]) -> Optional[str]:
    """Normalize a free-text filter; blank means absent."""
    return None if is_blank(value) else normalize_spaces(value)


def optional_token(value: Optional[str]) -> Optional[str]:
    """Normalize an identifier-like filter; blank means absent."""
    return None if is_blank(value) else remove_all_spaces(value)


def validate_range(
    field: str, minimum: Optional[N], maximum: Optional[N], whole: bool = False
) -> Tuple[Optional[N], Optional[N]]:
    """
    Validate optional positive lower and upper bounds.

    Each bound present must be greater than zero, and when both are present
    the lower one cannot exceed the upper one. With ``whole`` the bounds must
    also be integral (quantities, order counts).
    """
    check = validate_whole_number if whole else validate_positive
    if minimum is not None:
        _require_number(f"min_{field}", minimum)
        minimum = check(f"min_{field}", minimum)
    if maximum is not None:
        _require_number(f"max_{field}", maximum)
        maximum = check(f"max_{field}", maximum)
    if minimum is not None and maximum is not None and minimum > maximum:
        raise ValidationException(
            f"min_{field}", minimum, f"cannot be greater than max_{field} ({maximum})"
        )
    return minimum, maximum


def to_naive_utc(value: Optional[Moment]) -> Optional[Moment]:
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def validate_period(
    field: str, start: Optional[Moment], end: Optional[Moment], now: Moment
) -> Tuple[Optional[Moment], Optional[Moment]]:
    """
    Validate an optional date or datetime interval.

    Neither bound may lie in the future and the start cannot come after the end.
    Timezone-aware datetimes are converted to naive UTC first, the form in
    which order dates are stored.
    """
    start = to_naive_utc(start)
    end = to_naive_utc(end)
    if start is not None and start > now:
        raise ValidationException(f"{field}_start", start, "cannot be in the future")
    if end is not None and end > now:
        raise ValidationException(f"{field}_end", end, "cannot be in the future")
    if start is not None and end is not None and start > end:
        raise ValidationException(f"{field}_start", start, f"cannot be after {field}_end ({end})")
    return start, end
