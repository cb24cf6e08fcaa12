"""
Password strength validation.

The policy is length-only.

Example:
    from common.utils import validate_password

    is_valid, errors = validate_password("short")
    if not is_valid:
        print("Password errors:", errors)
"""

from typing import Any, List, Tuple


def validate_password(password: Any, min_length: int = 6) -> Tuple[bool, List[str]]:
    """
    Validate password strength.

    Args:
        password: The password to validate (None or non-string fails)
        min_length: Minimum password length

    Returns:
        Tuple of (is_valid: bool, errors: List[str])

    Examples:
        >>> validate_password("12345")
        (False, ['Password must be at least 6 characters'])
        >>> validate_password("123456")
        (True, [])
    """
    if not isinstance(password, str) or len(password) < min_length:
        return False, [f"Password must be at least {min_length} characters"]

    return True, []
