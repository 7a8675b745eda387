"""Tests for configuration field selectors."""

import pytest

from secret_gateway.adapter.fields import (
    AWS_CREDENTIAL,
    SECRET_NAME,
    AdapterFields,
    Selector,
    lookup,
)


class ExplodingMapping(dict):
    """Mapping whose lookups fail."""

    def __contains__(self, key):
        raise RuntimeError("lookup failed")


class TestLookup:
    """Test attribute lookup in the message."""

    def test_flat_key_wins(self):
        """Test an exact dotted key beats nested traversal."""
        message = {"http.path": "flat", "http": {"path": "nested"}}
        assert lookup(message, "http.path") == "flat"

    def test_nested_path(self):
        """Test dotted names traverse nested mappings."""
        message = {"http": {"querystring": {"secret": "db-password"}}}
        assert lookup(message, "http.querystring.secret") == "db-password"

    def test_missing(self):
        """Test unknown names resolve to None."""
        assert lookup({"http": {}}, "http.querystring.secret") is None


class TestSelector:
    """Test literal and templated selectors."""

    def test_literal(self):
        """Test a literal is returned unchanged."""
        selector = Selector("prod/db")

        assert not selector.is_dynamic
        assert selector.substitute({}) == "prod/db"

    def test_template(self):
        """Test expressions are resolved against the message."""
        selector = Selector("${env}/db/${http.querystring.name}")

        assert selector.is_dynamic
        assert (
            selector.substitute({"env": "prod", "http": {"querystring": {"name": "a"}}})
            == "prod/db/a"
        )

    def test_unresolved_renders_empty(self):
        """Test unresolvable expressions become the empty string."""
        assert Selector("${missing}").substitute({}) == ""
        assert Selector("x-${missing}").substitute(None) == "x-"
        assert Selector("${}").substitute({"": "value"}) == ""

    def test_non_string_values_rendered(self):
        """Test numbers and bytes are rendered as text."""
        assert Selector("${retries}").substitute({"retries": 5}) == "5"
        assert Selector("${raw}").substitute({"raw": b"abc"}) == "abc"

    def test_lookup_failure_renders_empty(self):
        """Test a failing message lookup does not raise."""
        assert Selector("${name}").substitute(ExplodingMapping()) == ""


class TestAdapterFields:
    """Test selector construction from configuration."""

    def test_missing_fields_are_empty(self):
        """Test absent fields resolve to the empty string."""
        fields = AdapterFields.from_config({SECRET_NAME: "db"})

        assert fields.secret_name.literal == "db"
        assert fields.region.literal == ""
        assert fields.version_stage.substitute({}) == ""

    def test_none_config(self):
        """Test a missing configuration yields empty selectors."""
        fields = AdapterFields.from_config(None)
        assert fields.secret_name.literal == ""

    @pytest.mark.parametrize(
        "value,expected",
        [(3, "3"), (2.5, "2.5"), (b"db", "db"), (None, ""), (["a"], ""), ({}, "")],
    )
    def test_value_coercion(self, value, expected):
        """Test configured values are coerced or dropped without raising."""
        fields = AdapterFields.from_config({"maxRetries": value})
        assert fields.max_retries.literal == expected

    def test_describe_masks_sensitive_fields(self):
        """Test the summary masks credentials and marks templates."""
        fields = AdapterFields.from_config(
            {
                SECRET_NAME: "${http.querystring.secret}",
                AWS_CREDENTIAL: "AKIAEXAMPLE:secret",
                "secretRegion": "eu-west-1",
            }
        )

        summary = fields.describe()

        assert summary[AWS_CREDENTIAL] == "***"
        assert summary[SECRET_NAME] == "dynamic(${http.querystring.secret})"
        assert summary["secretRegion"] == "eu-west-1"
        assert "secret" not in summary[AWS_CREDENTIAL]
