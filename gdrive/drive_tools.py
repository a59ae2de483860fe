"""
Google Drive Tools

Sharing for the generated report.
"""

import asyncio
import logging

from core.utils import handle_http_errors

logger = logging.getLogger(__name__)


@handle_http_errors("share_file", service_type="drive")
async def share_file(service, file_id: str, email: str, role: str = "writer") -> dict:
    """
    Grants a user access to a Drive file.

    Args:
        file_id (str): The Drive file (spreadsheet) ID.
        email (str): The user's email address.
        role (str): Permission role. Defaults to "writer".

    Returns:
        dict: The created permission resource.
    """
    logger.info(f"[share_file] Invoked. File: {file_id}, Email: '{email}', Role: {role}")

    permission = {"type": "user", "role": role, "emailAddress": email}
    created = await asyncio.to_thread(
        service.permissions()
        .create(fileId=file_id, body=permission, fields="id")
        .execute
    )
    logger.info(f"Shared {file_id} with {email}. Permission ID: {created.get('id')}")
    return created
