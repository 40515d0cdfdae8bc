"""Tests for naming convention helpers."""

import pytest

from column_impact.analyzers.naming import (
    contains_column,
    is_column_match,
    method_name_references,
    to_camel_case,
    to_pascal_case,
    to_snake_case,
)

COLUMN_NAMES = [
    "user_email", "USER_EMAIL", "userEmail", "UserEmail", "email", "EMAIL",
    "a_b_c", "_leading", "id_", "x", "", "created_at_utc",
]


class TestConversions:

    def test_camel_case(self):
        assert to_camel_case("user_email") == "userEmail"
        assert to_camel_case("USER_EMAIL") == "userEmail"
        assert to_camel_case("email") == "email"
        assert to_camel_case("") == ""

    def test_camel_case_keeps_existing_camel_and_pascal(self):
        assert to_camel_case("userEmail") == "userEmail"
        assert to_camel_case("UserEmail") == "userEmail"

    def test_pascal_case(self):
        assert to_pascal_case("user_email") == "UserEmail"
        assert to_pascal_case("created_at_utc") == "CreatedAtUtc"
        assert to_pascal_case("") == ""

    def test_snake_case(self):
        assert to_snake_case("userEmail") == "user_email"
        assert to_snake_case("UserEmail") == "user_email"
        assert to_snake_case("email") == "email"
        assert to_snake_case("") == ""

    @pytest.mark.parametrize("column", COLUMN_NAMES)
    def test_pascal_of_camel_is_pascal(self, column):
        assert to_pascal_case(to_camel_case(column)) == to_pascal_case(column)


class TestIsColumnMatch:

    @pytest.mark.parametrize("identifier", ["user_email", "userEmail", "UserEmail", "USEREMAIL"])
    def test_matches_every_convention(self, identifier):
        assert is_column_match(identifier, "user_email")

    def test_rejects_unrelated_names(self):
        assert not is_column_match("email", "user_email")
        assert not is_column_match("userEmailAddress", "user_email")

    def test_empty_inputs_never_match(self):
        assert not is_column_match("", "user_email")
        assert not is_column_match("userEmail", "")

    @pytest.mark.parametrize("identifier,column", [
        ("userEmail", "user_email"),
        ("user_email", "userEmail"),
        ("createdAt", "created_at"),
        ("status", "order_status"),
    ])
    def test_insensitive_to_case_changes(self, identifier, column):
        expected = is_column_match(identifier, column)
        for changed_identifier in (identifier.upper(), identifier.lower(), identifier.swapcase()):
            assert is_column_match(changed_identifier, column) == expected
        for changed_column in (column.upper(), column.lower()):
            assert is_column_match(identifier, changed_column) == expected


class TestContainsColumn:

    def test_finds_any_convention_inside_text(self):
        assert contains_column("SELECT u FROM User u WHERE u.userEmail = :e", "user_email")
        assert contains_column("select * from users where USER_EMAIL = ?1", "user_email")
        assert contains_column("return this.getUserEmail();", "user_email")

    def test_missing_reference(self):
        assert not contains_column("SELECT u FROM User u", "user_email")
        assert not contains_column("", "user_email")
        assert not contains_column("anything", "")


class TestMethodNameReferences:

    def test_derived_query_names(self):
        assert method_name_references("findByUserEmail", "user_email")
        assert method_name_references("userEmailExists", "user_email")

    def test_is_case_sensitive(self):
        assert not method_name_references("findbyuseremail", "user_email")

    def test_empty_inputs(self):
        assert not method_name_references("", "user_email")
        assert not method_name_references("findByUserEmail", "")
