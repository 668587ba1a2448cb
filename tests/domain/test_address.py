"""Tests for ResourceAddress, AddressTemplate and StatementContext."""

from __future__ import annotations

import pytest

from mgmtctl.domain.address import AddressTemplate, ResourceAddress, StatementContext

WM_TEMPLATE = AddressTemplate.of("{selected.profile}/subsystem=jca/workmanager=*")
DOMAIN = StatementContext({"selected.profile": ("profile", "full")})


class TestResourceAddress:
    def test_parse_and_str(self) -> None:
        address = ResourceAddress.parse("/subsystem=jca/workmanager=wm1")
        assert address.segments == (("subsystem", "jca"), ("workmanager", "wm1"))
        assert str(address) == "/subsystem=jca/workmanager=wm1"

    def test_leading_slash_optional(self) -> None:
        assert ResourceAddress.parse("subsystem=jca") == ResourceAddress.parse("/subsystem=jca")

    def test_root(self) -> None:
        root = ResourceAddress.root()
        assert root.is_root
        assert str(root) == "/"
        assert ResourceAddress.parse("/") == root

    @pytest.mark.parametrize("raw", ["/subsystem", "/=jca", "/subsystem="])
    def test_malformed_segment(self, raw: str) -> None:
        with pytest.raises(ValueError, match="Malformed address segment"):
            ResourceAddress.parse(raw)

    def test_navigation(self) -> None:
        address = ResourceAddress.parse("/subsystem=jca").append("workmanager", "wm1")
        assert address.last_type == "workmanager"
        assert address.last_name == "wm1"
        assert address.depth == 2
        assert address.parent == ResourceAddress.parse("/subsystem=jca")

    def test_child_and_subtree(self) -> None:
        jca = ResourceAddress.parse("/subsystem=jca")
        wm = ResourceAddress.parse("/subsystem=jca/workmanager=wm1")
        pool = ResourceAddress.parse("/subsystem=jca/workmanager=wm1/long-running-thread-pool=a")
        assert wm.is_child_of(jca)
        assert not pool.is_child_of(jca)
        assert pool.is_under(jca)
        assert jca.is_under(jca)
        assert not jca.is_under(wm)

    def test_hashable(self) -> None:
        seen = {ResourceAddress.parse("/a=b"), ResourceAddress.parse("a=b")}
        assert len(seen) == 1


class TestAddressTemplate:
    def test_standalone_drops_placeholder(self) -> None:
        address = WM_TEMPLATE.resolve(StatementContext(), "wm1")
        assert str(address) == "/subsystem=jca/workmanager=wm1"

    def test_domain_fills_placeholder(self) -> None:
        address = WM_TEMPLATE.resolve(DOMAIN, "wm1")
        assert str(address) == "/profile=full/subsystem=jca/workmanager=wm1"

    def test_wildcards_fill_left_to_right(self) -> None:
        template = WM_TEMPLATE.append("long-running-thread-pool=*")
        address = template.resolve(StatementContext(), "wm1", "lrt")
        assert str(address) == "/subsystem=jca/workmanager=wm1/long-running-thread-pool=lrt"

    def test_unfilled_wildcard_stays(self) -> None:
        assert str(WM_TEMPLATE.resolve(StatementContext())) == "/subsystem=jca/workmanager=*"

    def test_append_and_last_segment(self) -> None:
        template = AddressTemplate.of("").append("/server-group=*/")
        assert template.template == "server-group=*"
        assert template.last_name == "server-group"
        assert template.last_value == "*"
        assert AddressTemplate.of("").last_name is None

    def test_malformed_template_segment(self) -> None:
        with pytest.raises(ValueError, match="Malformed template segment"):
            AddressTemplate.of("subsystem").resolve(StatementContext())


class TestStatementContext:
    def test_unknown_placeholder(self) -> None:
        assert StatementContext().resolve("selected.profile") is None

    def test_with_value_is_a_copy(self) -> None:
        base = StatementContext()
        extended = base.with_value("selected.host", ("host", "master"))
        assert extended.resolve("selected.host") == ("host", "master")
        assert base.resolve("selected.host") is None
