from __future__ import annotations

import requests

from bounty_pricer.errors import ResolutionFailed

DEPLOYMENT_ID_URL = "https://indexer.poidh.xyz/deployment_id"


class DeploymentClient:
    def __init__(
        self,
        url: str = DEPLOYMENT_ID_URL,
        timeout_s: int = 15,
        session: requests.Session | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.url = url
        self.timeout = (timeout_s, timeout_s)

    def fetch_deployment_id(self) -> str:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ResolutionFailed(f"Deployment ID fetch failed: {exc}") from exc
        if not response.ok:
            raise ResolutionFailed(f"Deployment ID fetch failed: {response.status_code}")
        try:
            body = response.json()
        except ValueError as exc:
            raise ResolutionFailed("Deployment ID response is not JSON") from exc
        deployment_id = body.get("deploymentId") if isinstance(body, dict) else None
        if not deployment_id or not isinstance(deployment_id, str):
            raise ResolutionFailed("Deployment ID missing from response")
        return deployment_id
