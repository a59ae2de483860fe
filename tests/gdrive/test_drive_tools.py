"""
Unit tests for Drive sharing.
"""

import pytest
from unittest.mock import Mock
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from gdrive.drive_tools import share_file


@pytest.mark.asyncio
async def test_share_file_grants_writer_permission():
    mock_service = Mock()
    mock_service.permissions().create().execute = Mock(return_value={"id": "perm_1"})

    result = await share_file(mock_service, "sheet_abc", "user@example.com")

    assert result == {"id": "perm_1"}
    call_args = mock_service.permissions().create.call_args
    assert call_args[1]["fileId"] == "sheet_abc"
    assert call_args[1]["body"] == {
        "type": "user",
        "role": "writer",
        "emailAddress": "user@example.com",
    }


@pytest.mark.asyncio
async def test_share_file_custom_role():
    mock_service = Mock()
    mock_service.permissions().create().execute = Mock(return_value={"id": "perm_2"})

    await share_file(mock_service, "sheet_abc", "viewer@example.com", role="reader")

    call_args = mock_service.permissions().create.call_args
    assert call_args[1]["body"]["role"] == "reader"
