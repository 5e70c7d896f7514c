"""Version information shown on the "about" screen."""
import logging
from typing import Dict

from stand_client import StandAPIClient, StandConnectionError

logger = logging.getLogger('standapp.about')

VERSIONS_PATH = '/api/versions'


class AboutService:
    """Reads ``/api/versions``; unknown values are reported as ``N/A``."""

    def __init__(self, client: StandAPIClient) -> None:
        self._client = client

    def get_versions(self) -> Dict[str, str]:
        versions = {'frontend_version': 'N/A', 'backend_version': 'N/A'}
        try:
            resp = self._client.get(VERSIONS_PATH)
            if resp.status_code == 200 and resp.success:
                body = resp.json()
                for key in versions:
                    versions[key] = body.get(key) or 'N/A'
            else:
                logger.warning("Could not fetch versions: HTTP %s", resp.status_code)
        except StandConnectionError as exc:
            logger.warning("Could not fetch versions: %s", exc)
        return versions
