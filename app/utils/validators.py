"""
Validation utilities for the Rental Listing API.
Provides the field checks shared by the auth, listing and inquiry services.
"""

import re
from typing import Any, Dict, Iterable, List, Optional
from decimal import Decimal, InvalidOperation
from datetime import date, datetime
from email_validator import validate_email, EmailNotValidError

from app.utils.exceptions import ValidationError, MissingFieldsError, BadRequestError

TRUTHY_TOKENS = frozenset({"1", "true", "yes", "on"})
FALSY_TOKENS = frozenset({"0", "false", "no", "off"})


class ValidationUtils:
    """
    Utility class for common validation operations.
    Provides reusable validation methods for request parameters.
    """

    # 10 digit Indian mobile number
    PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")

    @staticmethod
    def clean_string(value: Any) -> str:
        """Trim a raw parameter; None becomes the empty string."""
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def require_fields(params: Dict[str, Any], fields: Iterable[str]) -> None:
        """
        Check that every named parameter is present and non-blank.

        Args:
            params: Request parameters
            fields: Required parameter names, in the order they are reported

        Raises:
            MissingFieldsError: Listing every missing field
        """
        missing = [f for f in fields if not ValidationUtils.clean_string(params.get(f))]
        if missing:
            raise MissingFieldsError(missing)

    @staticmethod
    def validate_email_address(email: Any) -> str:
        """
        Validate email address format.

        Args:
            email: Email to validate

        Returns:
            Normalized, lower-cased email string

        Raises:
            ValidationError: If email is invalid
        """
        email_str = ValidationUtils.clean_string(email).lower()

        try:
            valid_email = validate_email(email_str, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError:
            raise ValidationError("Invalid email format")

    @staticmethod
    def validate_phone_number(phone: Any, message: str = "Invalid phone number") -> str:
        """
        Validate a 10 digit mobile number starting with 6-9.

        Non-digit characters are stripped before matching, so "+91 98765-43210"
        is rejected (12 digits) while "98765 43210" is accepted.

        Returns:
            The digits-only phone number

        Raises:
            ValidationError: If phone number is invalid
        """
        digits = re.sub(r"\D", "", ValidationUtils.clean_string(phone))

        if not ValidationUtils.PHONE_PATTERN.match(digits):
            raise ValidationError(message)

        return digits

    @staticmethod
    def validate_password(password: Any, min_length: int) -> str:
        password_str = "" if password is None else str(password)
        if len(password_str) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")
        return password_str

    @staticmethod
    def validate_positive_id(value: Any, message: str) -> int:
        """
        Parse a record id parameter.

        Raises:
            BadRequestError: If the value is not an integer greater than zero
        """
        try:
            int_value = int(str(value).strip())
        except (ValueError, TypeError):
            raise BadRequestError(message)

        if int_value <= 0:
            raise BadRequestError(message)

        return int_value

    @staticmethod
    def validate_rent(value: Any) -> Decimal:
        """
        Validate a rent amount.

        Raises:
            ValidationError: If rent is not a number greater than zero
        """
        try:
            rent = Decimal(ValidationUtils.clean_string(value))
        except (InvalidOperation, ValueError):
            raise ValidationError("Invalid rent amount")

        if not rent.is_finite() or rent <= 0:
            raise ValidationError("Invalid rent amount")

        return rent

    @staticmethod
    def validate_date(value: Any) -> Optional[date]:
        """Parse a YYYY-MM-DD date; blank means no date."""
        date_str = ValidationUtils.clean_string(value)
        if not date_str:
            return None

        try:
            return datetime.strptime(date_str, "%Y-%m-%d").date()
        except ValueError:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD")

    @staticmethod
    def parse_flag(value: Any) -> bool:
        """Checkbox semantics: any truthy token means True, everything else False."""
        if isinstance(value, bool):
            return value
        return ValidationUtils.clean_string(value).lower() in TRUTHY_TOKENS

    @staticmethod
    def parse_string_list(value: Any) -> List[str]:
        """Accept a list, a JSON-style list already decoded, or a comma separated string."""
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            items = value
        else:
            items = str(value).split(",")
        return [str(item).strip() for item in items if str(item).strip()]
