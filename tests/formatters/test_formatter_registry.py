"""Tests for Formatter protocol and registry."""

import pytest

from pg_console.formatters.base import Formatter, FormatterRegistry, registry
from tests.fakes import make_result


class _StubFormatter:
    def format(self, result, caption=None):
        for row in result.rows:
            yield str(row)


class _BadFormatter:
    """Missing format method."""


@pytest.mark.unit
def test_stub_formatter_implements_protocol():
    assert isinstance(_StubFormatter(), Formatter)


@pytest.mark.unit
def test_bad_formatter_does_not_implement_protocol():
    assert not isinstance(_BadFormatter(), Formatter)


@pytest.mark.unit
def test_registry_register_and_get():
    reg = FormatterRegistry()
    reg.register("stub")(_StubFormatter)
    fmt = reg.get("stub")
    assert list(fmt.format(make_result([(1,)], [("id", 23)]))) == ["(1,)"]


@pytest.mark.unit
def test_registry_unknown_format():
    reg = FormatterRegistry()
    reg.register("stub")(_StubFormatter)
    with pytest.raises(KeyError, match="Unknown format 'xml'. Available: stub"):
        reg.get("xml")


@pytest.mark.unit
def test_builtin_formatters_registered():
    import pg_console.formatters  # noqa: F401

    assert registry.available == ["csv", "json", "table"]
