"""Tests for id patterns, generation, and validation."""

import pytest

from shopledger.domain.ids import ID_PATTERNS, TYPE_PREFIXES, generate_id, validate_id


class TestGenerateId:
    @pytest.mark.parametrize("record_type", sorted(TYPE_PREFIXES))
    def test_matches_pattern(self, record_type: str) -> None:
        record_id = generate_id(TYPE_PREFIXES[record_type])
        assert ID_PATTERNS[record_type].match(record_id)

    def test_length(self) -> None:
        assert len(generate_id("itm_")) == len("itm_") + 10

    def test_random(self) -> None:
        ids = {generate_id("cus_") for _ in range(50)}
        assert len(ids) == 50


class TestValidateId:
    def test_valid_item(self) -> None:
        assert validate_id("itm_0123456789", "item") is True

    def test_wrong_prefix(self) -> None:
        assert validate_id("cus_0123456789", "item") is False

    def test_uppercase_hex_rejected(self) -> None:
        assert validate_id("itm_ABCDEF0123", "item") is False

    def test_unknown_type(self) -> None:
        assert validate_id("itm_0123456789", "invoice") is False
