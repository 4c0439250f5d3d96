"""Tests for canonical phone/email keys and contact-field checks."""

import pytest

from shopledger.domain.identity import (
    email_key,
    format_phone,
    phone_key,
    validate_email,
    validate_phone,
)


class TestPhoneKey:
    @pytest.mark.parametrize(
        "raw",
        ["0712345678", "0712-345-678", "0712 345 678", "(0712) 345.678"],
    )
    def test_punctuation_stripped(self, raw: str) -> None:
        assert phone_key(raw) == "0712345678"

    def test_leading_zero_not_normalized(self) -> None:
        assert phone_key("712345678") != phone_key("0712345678")

    def test_blank(self) -> None:
        assert phone_key("") == ""
        assert phone_key(None) == ""


class TestEmailKey:
    def test_lowercased(self) -> None:
        assert email_key("Jane@Example.COM") == "jane@example.com"

    def test_blank_has_no_key(self) -> None:
        assert email_key("") is None
        assert email_key("   ") is None
        assert email_key(None) is None


class TestValidatePhone:
    @pytest.mark.parametrize("phone", ["0712345678", "0712-345-678", "712345678", "912345678"])
    def test_valid(self, phone: str) -> None:
        assert validate_phone(phone) is True

    @pytest.mark.parametrize("phone", ["07123456789", "9123456789", "", "no digits"])
    def test_invalid(self, phone: str) -> None:
        assert validate_phone(phone) is False


class TestFormatPhone:
    def test_trunk_prefix_grouping(self) -> None:
        assert format_phone("0712345678") == "0712-345-678"

    def test_without_trunk_prefix(self) -> None:
        assert format_phone("712345678") == "712-345-678"

    def test_partial_number(self) -> None:
        assert format_phone("07123") == "0712-3"

    def test_extra_digits_dropped(self) -> None:
        assert format_phone("9123456789") == "912-345-678"


class TestValidateEmail:
    @pytest.mark.parametrize(
        "email", ["jane@example.com", "a.b@shop.co.ke", " jane@example.com ", None, "", "   "]
    )
    def test_valid(self, email: str | None) -> None:
        assert validate_email(email) is True

    @pytest.mark.parametrize("email", ["jane", "jane@example", "jane doe@example.com"])
    def test_invalid(self, email: str) -> None:
        assert validate_email(email) is False
