"""
Input validation utilities.

Centralized validation logic with clear error messages.
Philosophy: Simple, clear, and reusable validation functions.
"""

from typing import Any, Dict, List, Mapping, Optional
import logging

from blog_proxy.exceptions import ValidationError

logger = logging.getLogger(__name__)

POST_STATUSES = ['publish', 'draft', 'private']
MAX_PER_PAGE = 100
MIN_SEARCH_LENGTH = 2
MAX_TITLE_LENGTH = 255
POST_WRITE_FIELDS = ['title', 'content', 'excerpt', 'status', 'categories', 'tags']


class ValidationResult:
    """Result of a validation check"""

    def __init__(self, is_valid: bool, error: Optional[str] = None, value: Any = None):
        self.is_valid = is_valid
        self.error = error
        self.value = value

    def __bool__(self):
        return self.is_valid


def validate_integer(
    value: Any,
    field_name: str,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None
) -> ValidationResult:
    """
    Validate that value is a whole number within bounds.

    Args:
        value: Value to validate (query strings arrive as str)
        field_name: Field name for error messages
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive)

    Returns:
        ValidationResult with the parsed int as value
    """
    if isinstance(value, bool):
        return ValidationResult(False, f"{field_name} must be an integer")

    try:
        num = int(str(value).strip())
    except (ValueError, TypeError):
        return ValidationResult(False, f"{field_name} must be an integer")

    if min_value is not None and num < min_value:
        return ValidationResult(
            False,
            f"{field_name} must be at least {min_value}"
        )

    if max_value is not None and num > max_value:
        return ValidationResult(
            False,
            f"{field_name} must be at most {max_value}"
        )

    return ValidationResult(True, value=num)


def validate_string(
    value: Any,
    field_name: str,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    required: bool = True
) -> ValidationResult:
    """
    Validate string value.

    Args:
        value: Value to validate
        field_name: Field name for error messages
        min_length: Minimum string length
        max_length: Maximum string length
        required: Whether field is required

    Returns:
        ValidationResult
    """
    if value is None or value == '':
        if required:
            return ValidationResult(False, f"{field_name} is required")
        return ValidationResult(True)

    if not isinstance(value, str):
        return ValidationResult(False, f"{field_name} must be a string")

    if min_length is not None and len(value) < min_length:
        return ValidationResult(
            False,
            f"{field_name} must be at least {min_length} characters"
        )

    if max_length is not None and len(value) > max_length:
        return ValidationResult(
            False,
            f"{field_name} must be at most {max_length} characters"
        )

    return ValidationResult(True, value=value)


def validate_choice(
    value: Any,
    field_name: str,
    choices: List[Any]
) -> ValidationResult:
    """
    Validate value is in allowed choices.

    Args:
        value: Value to validate
        field_name: Field name for error messages
        choices: List of allowed values

    Returns:
        ValidationResult
    """
    if value not in choices:
        choices_str = ', '.join(str(c) for c in choices)
        return ValidationResult(
            False,
            f"{field_name} must be one of: {choices_str}"
        )

    return ValidationResult(True, value=value)


def _raise_if_errors(errors: Dict[str, str]) -> None:
    if errors:
        logger.debug(f"Validation failed: {errors}")
        raise ValidationError('The given data was invalid.', errors)


# Composite validators for the API routes

def validate_post_query(args: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate the listing filters for GET /wordpress/posts.

    Returns:
        Dict of the filters that were supplied, with integers parsed

    Raises:
        ValidationError: with a field -> message map
    """
    errors: Dict[str, str] = {}
    params: Dict[str, Any] = {}

    checks = {
        'per_page': lambda v: validate_integer(v, 'per_page', min_value=1, max_value=MAX_PER_PAGE),
        'page': lambda v: validate_integer(v, 'page', min_value=1),
        'author': lambda v: validate_integer(v, 'author', min_value=1),
        'categories': lambda v: validate_string(v, 'categories', required=False),
        'search': lambda v: validate_string(v, 'search', required=False),
        'status': lambda v: validate_choice(v, 'status', POST_STATUSES),
    }

    for field, check in checks.items():
        if field not in args:
            continue
        result = check(args.get(field))
        if not result:
            errors[field] = result.error
        elif result.value is not None:
            params[field] = result.value

    _raise_if_errors(errors)
    return params


def validate_search_query(args: Mapping[str, Any]) -> str:
    """Validate the q parameter for GET /wordpress/search."""
    query = args.get('q')
    if isinstance(query, str):
        query = query.strip()

    result = validate_string(query, 'q', min_length=MIN_SEARCH_LENGTH)
    if not result:
        _raise_if_errors({'q': result.error})
    return query


def validate_post_payload(data: Any, partial: bool = False) -> Dict[str, Any]:
    """
    Validate a create (partial=False) or update (partial=True) body.

    Only the known post fields are forwarded upstream.
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.', {'body': 'must be a JSON object'})

    errors: Dict[str, str] = {}
    payload = {field: data[field] for field in POST_WRITE_FIELDS if field in data}

    if partial and not payload:
        errors['body'] = f"at least one of {', '.join(POST_WRITE_FIELDS)} is required"

    if 'title' in payload or not partial:
        result = validate_string(payload.get('title'), 'title', min_length=1, max_length=MAX_TITLE_LENGTH)
        if not result:
            errors['title'] = result.error

    for field in ('content', 'excerpt'):
        if field in payload:
            result = validate_string(payload[field], field, required=False)
            if not result:
                errors[field] = result.error

    if 'status' in payload:
        result = validate_choice(payload['status'], 'status', POST_STATUSES)
        if not result:
            errors['status'] = result.error

    for field in ('categories', 'tags'):
        if field in payload and not isinstance(payload[field], (str, list)):
            errors[field] = f"{field} must be a string or a list"

    _raise_if_errors(errors)
    return payload
