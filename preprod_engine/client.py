"""HTTP client for the generation endpoints.

Every endpoint takes a JSON POST and answers with JSON.  Failures come back
as ``{"error": ..., "details": ...}`` bodies and surface here as
GenerationError.  A 2xx body that is not valid JSON (a model response
passed through verbatim) is run through the recovery pipeline.

No retries and no backoff: a failed call is reported to the caller as-is.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import jsonschema
import requests

from preprod_engine.config import DEFAULT_HTTP_TIMEOUT, Settings
from preprod_engine.contract_validate import validate_generation_error
from preprod_engine.recovery import clean_and_parse_json

LOGGER = logging.getLogger(__name__)

GENERATION_ENDPOINTS: Dict[str, str] = {
    kind: f"/api/generate/{kind}"
    for kind in (
        "questionnaire",
        "equipment",
        "budget",
        "locations",
        "casting",
        "props-wardrobe",
        "storyboards",
        "episode-marketing",
        "episode-thumbnail",
    )
}
IMAGE_ENDPOINT = "/api/generate-image"

_DETAILS_MAX = 500  # chars of a non-JSON error body kept as details


class GenerationError(RuntimeError):
    """A generation endpoint answered with a non-2xx status."""

    def __init__(self, status: int, error: str, details: Any = None) -> None:
        self.status = status
        self.error = error
        self.details = details
        message = f"ERROR: generation failed ({status}): {error}"
        if details:
            message += f" ({details})"
        super().__init__(message)


class GenerationClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        *,
        session: Optional[requests.Session] = None,
        verify: bool = True,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.verify = verify

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "GenerationClient":
        return cls(
            settings.api_base_url,
            settings.http_timeout,
            verify=settings.verify_tls,
            **kwargs,
        )

    def generate(self, kind: str, payload: Dict[str, Any]) -> Any:
        """POST *payload* to the ``/api/generate/<kind>`` endpoint.

        Raises:
            ValueError: *kind* is not a known generation endpoint.
            GenerationError: the endpoint answered with an error status.
            ParseFailure: a 2xx body could not be recovered as JSON.
        """
        if kind not in GENERATION_ENDPOINTS:
            raise ValueError(
                f"unknown generation endpoint {kind!r}; "
                f"expected one of {sorted(GENERATION_ENDPOINTS)}"
            )
        return self._post(GENERATION_ENDPOINTS[kind], payload)

    def generate_image(self, payload: Dict[str, Any]) -> Any:
        return self._post(IMAGE_ENDPOINT, payload)

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        LOGGER.info("POST %s", path)
        response = self.session.post(
            f"{self.base_url}{path}",
            json=payload,
            timeout=self.timeout,
            verify=self.verify,
        )
        if not response.ok:
            raise _error_from_response(response)
        try:
            return response.json()
        except ValueError:
            LOGGER.warning("%s returned non-JSON body; attempting recovery", path)
            return clean_and_parse_json(response.text)


def _error_from_response(response: requests.Response) -> GenerationError:
    try:
        body = response.json()
        validate_generation_error(body)
    except (ValueError, jsonschema.ValidationError):
        return GenerationError(
            response.status_code,
            response.reason or "HTTP error",
            response.text[:_DETAILS_MAX] or None,
        )
    return GenerationError(response.status_code, body["error"], body.get("details"))
