"""Unit tests for Sentry initialization."""

from unittest.mock import patch

from bigo_mcp.core.sentry import init_sentry


class TestInitSentry:
    """Test init_sentry."""

    def test_noop_without_dsn(self, monkeypatch):
        """Sentry is left uninitialized when SENTRY_DSN is unset."""
        monkeypatch.delenv("SENTRY_DSN", raising=False)
        with patch("bigo_mcp.core.sentry.sentry_sdk.init") as init:
            init_sentry()
        init.assert_not_called()

    def test_tags_events(self, monkeypatch):
        """Events are tagged with the service name before sending."""
        monkeypatch.setenv("SENTRY_DSN", "https://key@example.invalid/1")
        monkeypatch.setenv("SENTRY_ENVIRONMENT", "production")
        with patch("bigo_mcp.core.sentry.sentry_sdk.init") as init, \
                patch("bigo_mcp.core.sentry.sentry_sdk.set_tag") as set_tag:
            init_sentry("bigo-test")

        kwargs = init.call_args.kwargs
        assert kwargs["environment"] == "production"
        assert kwargs["traces_sample_rate"] == 0.1
        event = kwargs["before_send"]({}, None)
        assert event["tags"] == {"service": "bigo-test", "language": "python", "component": "mcp-server"}
        set_tag.assert_any_call("service", "bigo-test")
