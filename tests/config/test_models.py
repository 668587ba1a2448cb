"""Tests for config models — defaults and sparse overrides."""

import pytest
from pydantic import ValidationError

from mgmtctl.config.models import MgmtConfig, ServerConfig


class TestServerConfig:
    def test_defaults(self) -> None:
        server = ServerConfig()
        assert server.mode == "standalone"
        assert server.profile == "full"
        assert server.server_group is None
        assert server.host is None

    def test_frozen(self) -> None:
        server = ServerConfig()
        with pytest.raises(ValidationError):
            server.mode = "domain"  # type: ignore[misc]

    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(mode="cluster")  # type: ignore[arg-type]


class TestMgmtConfig:
    def test_full_defaults(self) -> None:
        """Fresh MgmtConfig has sensible defaults for all sections."""
        cfg = MgmtConfig()
        assert cfg.server.mode == "standalone"
        assert cfg.jca.thread_pool_attributes == ["max-threads", "queue-length", "thread-factory"]
        assert cfg.jca.reload_depth == 1
        assert cfg.selection.collation == "codepoint"
        assert cfg.events.journal_size == 100

    def test_sparse_override(self) -> None:
        """Only override fields you care about — rest keeps defaults."""
        cfg = MgmtConfig.model_validate(
            {
                "server": {"mode": "domain"},
                "jca": {"reload_depth": 2},
            }
        )
        assert cfg.server.mode == "domain"
        assert cfg.server.profile == "full"  # default preserved
        assert cfg.jca.reload_depth == 2
        assert cfg.jca.thread_pool_attributes[0] == "max-threads"  # default preserved

    def test_invalid_collation(self) -> None:
        with pytest.raises(ValidationError):
            MgmtConfig.model_validate({"selection": {"collation": "locale"}})
