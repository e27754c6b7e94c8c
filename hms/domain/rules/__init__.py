from hms.domain.rules.input_rules import (
    InvalidInputError,
    parse_int_with_fallback,
    parse_number_with_fallback,
    require_one_of,
    require_positive_int,
)

__all__ = [
    "InvalidInputError",
    "parse_int_with_fallback",
    "parse_number_with_fallback",
    "require_one_of",
    "require_positive_int",
]
