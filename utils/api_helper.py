"""
Helpers for inspecting ``requests`` responses in the API suites.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

logger = logging.getLogger(__name__)


class ApiHelper:

    @staticmethod
    def parse_json_response(response: requests.Response) -> Optional[Any]:
        """Parse JSON body, None if the body is not JSON"""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to parse JSON response: {e}")
            return None

    @staticmethod
    def build_query_string(params: Dict[str, Any]) -> str:
        """Build a query string, dropping None values"""
        return urlencode({key: str(value) for key, value in params.items() if value is not None})

    @staticmethod
    def validate_status(response: requests.Response, expected_status: int) -> bool:
        return response.status_code == expected_status

    @staticmethod
    def get_error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.reason or ''
        if isinstance(body, dict):
            return body.get('message') or body.get('error') or 'Unknown error'
        return 'Unknown error'
