"""
Tests for the application factory.
"""

import logging
from unittest.mock import patch

from invoicing.config import Settings
from invoicing.main import create_application


class TestCreateApplication:

    def test_configures_logging(self):
        settings = Settings(_env_file=None, environment="testing", storage_backend="memory", log_level="warning")

        with patch("invoicing.main.logging.basicConfig") as basic_config:
            app = create_application(settings)

        basic_config.assert_called_once()
        assert basic_config.call_args.kwargs["level"] == logging.WARNING
        assert app.state.container is not None

    def test_debug_logs_everything(self):
        settings = Settings(_env_file=None, environment="testing", storage_backend="memory", debug=True)

        with patch("invoicing.main.logging.basicConfig") as basic_config:
            create_application(settings)

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG
