"""Tests for the tree-sitter Java parser."""

import pytest

from column_impact.exceptions import FileParseError
from column_impact.parsers.java_parser import simple_type_name


class TestJavaSourceParser:

    def test_entity_declarations(self, parse_java, sample_source):
        parsed = parse_java(sample_source("entity/User.java"), "User.java")

        assert parsed.package_name == "com.example.entity"
        assert parsed.primary_type.name == "User"
        assert parsed.primary_type.kind == "class"
        assert [a.name for a in parsed.primary_type.annotations] == ["Entity"]
        assert [f.names for f in parsed.primary_type.fields] == [["userEmail"], ["name"]]
        assert [m.name for m in parsed.primary_type.methods] == ["getUserEmail"]

    def test_field_annotation_arguments(self, parse_java, sample_source):
        parsed = parse_java(sample_source("entity/User.java"), "User.java")
        email = parsed.primary_type.fields[0]

        assert email.type_name == "String"
        assert email.start_line == 8
        column = email.annotations[0]
        assert column.name == "Column"
        assert column.string_arguments == {"name": "user_email"}
        assert column.arguments == {"name": '"user_email"'}

    def test_interface_supertypes(self, parse_java, sample_source):
        parsed = parse_java(sample_source("repository/UserRepository.java"), "UserRepository.java")

        assert parsed.primary_type.is_interface
        assert parsed.primary_type.supertypes == ["JpaRepository"]

    def test_method_parameters_and_lines(self, parse_java, sample_source):
        parsed = parse_java(sample_source("repository/UserRepository.java"), "UserRepository.java")
        find, lookup = parsed.primary_type.methods

        assert find.name == "findByUserEmail"
        assert find.start_line == 7
        assert [(p.name, p.type_name) for p in find.parameters] == [("email", "String")]
        # The declaration starts at its first annotation
        assert lookup.start_line == 9

    def test_unnamed_annotation_argument_is_value(self, parse_java, sample_source):
        parsed = parse_java(sample_source("repository/UserRepository.java"), "UserRepository.java")
        query = parsed.all_annotations[0]

        assert query.name == "Query"
        assert query.string_argument("value") == "SELECT u FROM User u WHERE u.userEmail = :email"

    def test_non_string_arguments_keep_source_text(self, parse_java, sample_source):
        parsed = parse_java(sample_source("controller/UserController.java"), "UserController.java")
        legacy = parsed.primary_type.methods[-1]
        mapping = legacy.annotations[0]

        assert mapping.arguments["method"] == "RequestMethod.PUT"
        assert "method" not in mapping.string_arguments
        assert mapping.string_argument("value", "path") == "/legacy"

    def test_concatenated_strings(self, parse_java):
        parsed = parse_java("""
            package com.example.repository;

            public interface AccountRepository {
                @Query("select a from Account a " + "where a.userEmail = :email")
                Account byEmail(String email);
            }
        """)

        query = parsed.all_annotations[0]
        assert query.string_arguments["value"] == "select a from Account a where a.userEmail = :email"

    def test_qualified_annotation_uses_simple_name(self, parse_java):
        parsed = parse_java("""
            package com.example;

            @org.springframework.stereotype.Service
            public class Billing {
            }
        """)

        assert [a.name for a in parsed.primary_type.annotations] == ["Service"]

    def test_multiple_variables_in_one_field(self, parse_java):
        parsed = parse_java("""
            package com.example;

            public class Point {
                private int x, y;
            }
        """)

        assert parsed.primary_type.fields[0].names == ["x", "y"]

    def test_nested_types_feed_file_level_lists(self, parse_java):
        parsed = parse_java("""
            package com.example;

            public class Outer {
                private String first;

                static class Inner {
                    private String second;

                    void work() {
                    }
                }
            }
        """)

        assert parsed.primary_type.name == "Outer"
        assert [f.names for f in parsed.primary_type.fields] == [["first"]]
        assert [f.names[0] for f in parsed.all_fields] == ["first", "second"]
        assert [m.name for m in parsed.all_methods] == ["work"]

    def test_syntax_error_raises(self, parse_java):
        with pytest.raises(FileParseError) as exc_info:
            parse_java("public class Broken { void oops( {", "Broken.java")

        assert exc_info.value.file_path == "Broken.java"

    def test_file_without_class_or_interface_raises(self, parse_java):
        with pytest.raises(FileParseError):
            parse_java("""
                package com.example;

                public enum Status { ACTIVE, DISABLED }
            """)


class TestSimpleTypeName:

    @pytest.mark.parametrize("text,expected", [
        ("JpaRepository<User, Long>", "JpaRepository"),
        ("org.springframework.data.repository.CrudRepository<User, Long>", "CrudRepository"),
        ("Serializable", "Serializable"),
    ])
    def test_strips_package_and_generics(self, text, expected):
        assert simple_type_name(text) == expected
