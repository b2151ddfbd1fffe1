import logging
from typing import Dict, Optional

import requests
from pydantic import ValidationError

from .schema import AnalysisRequest, AnalysisResponse
from ..errors import InterpretationError, MalformedResponseError, NetworkError

logger = logging.getLogger("board.analysis")

CALCULATE_PATH = "/calculate"


class AnalysisClient:
    """
    Sends one rendered drawing plus the symbol table snapshot to the
    interpretation service and validates what comes back.
    No retries; every failure is raised as an AnalysisError subclass.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{CALCULATE_PATH}"

    def build_request(self, image_data_url: str, symbols: Dict[str, str]) -> AnalysisRequest:
        return AnalysisRequest(image=image_data_url, dict_of_vars=dict(symbols))

    def request(self, image_data_url: str, symbols: Dict[str, str]) -> AnalysisResponse:
        body = self.build_request(image_data_url, symbols).model_dump()
        logger.info("POST %s (%d vars)", self.endpoint, len(symbols))

        try:
            resp = self.http.post(self.endpoint, json=body, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            # ValueError covers undecodable JSON bodies
            logger.warning("Analysis request failed: %s", e)
            raise NetworkError(str(e)) from e

        return parse_response(payload)


def parse_response(payload) -> AnalysisResponse:
    """Parse-or-reject for the service's JSON body."""
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"expected a JSON object, got {type(payload).__name__}")
    if not payload.get("data"):
        raise InterpretationError("service returned no results")
    try:
        return AnalysisResponse.model_validate(payload)
    except ValidationError as e:
        logger.warning("Malformed analysis response: %s", e)
        raise MalformedResponseError(str(e)) from e
