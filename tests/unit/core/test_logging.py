import logging

import structlog

from meeting_client.core.logging import configure_logging


def test_configure_logging_json(mocker):
    configure = mocker.patch("structlog.configure")
    mocker.patch("logging.basicConfig")

    configure_logging(log_level="debug", json_logs=True)

    processors = configure.call_args.kwargs["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    logging.basicConfig.assert_called_once_with(format="%(message)s", level=logging.DEBUG)


def test_configure_logging_console(mocker):
    configure = mocker.patch("structlog.configure")
    mocker.patch("logging.basicConfig")

    configure_logging(log_level="warning", json_logs=False)

    processors = configure.call_args.kwargs["processors"]
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
