import pytest
import structlog

from authflow.core.logging import configure_logging, mask_email


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.mark.parametrize(
    "email, expected",
    [
        ("jonathan@example.com", "jon***@example.com"),
        ("al@example.com", "al***@example.com"),
        ("", "unknown"),
        (None, "unknown"),
        ("not-an-email", "unknown"),
    ],
)
def test_mask_email(email, expected):
    assert mask_email(email) == expected


def test_configure_logging_json_renderer(reset_structlog):
    configure_logging(log_level="debug", json_logs=True)

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
    assert config["logger_factory"].__class__ is structlog.stdlib.LoggerFactory


def test_configure_logging_console_renderer(reset_structlog):
    configure_logging(json_logs=False)

    config = structlog.get_config()
    assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
