from signal_desk.query.validator import validate_query


def normalize_query(validated: str) -> str:
    """Uppercase a validated query. Interior whitespace is left as-is."""
    return validated.upper()


def validate_and_normalize(raw: str) -> str:
    """Trim, validate and uppercase raw input in one step.

    Raises a ``QueryValidationError`` subclass on bad input.
    """
    return normalize_query(validate_query(raw))
