"""
Unit tests for application lifecycle.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from jks_orchestrator.lifespan import lifespan


@pytest.mark.asyncio
async def test_lifespan_startup_and_shutdown(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{}", encoding="utf-8")

    with (
        patch(
            "jks_orchestrator.lifespan.get_settings",
            return_value=SimpleNamespace(orchestrator_config_file=str(config_file)),
        ),
        patch("jks_orchestrator.lifespan.logger") as mock_logger,
    ):
        async with lifespan(MagicMock()):
            pass

    assert mock_logger.info.called
    assert not mock_logger.warning.called


@pytest.mark.asyncio
async def test_lifespan_warns_about_missing_config(tmp_path):
    with (
        patch(
            "jks_orchestrator.lifespan.get_settings",
            return_value=SimpleNamespace(orchestrator_config_file=str(tmp_path / "none.json")),
        ),
        patch("jks_orchestrator.lifespan.logger") as mock_logger,
    ):
        async with lifespan(MagicMock()):
            pass

    assert mock_logger.warning.called


def test_api_modules_share_the_configured_logger():
    from jks_orchestrator import lifespan
    from jks_orchestrator.api.v1.jobs import api
    from jks_orchestrator.core import logging as core_logging

    assert lifespan.logger is core_logging.logger
    assert api.logger is core_logging.logger
