"""Management API exports."""

from .api_responses import ApiResponse
from .management_client import ManagementApiClient

__all__ = ["ApiResponse", "ManagementApiClient"]
