"""People directory API client.

This module defines a small client wrapper around an OData‑style REST
service that exposes a ``People`` entity set.  The client uses the
``requests`` library internally and keeps a single
:class:`requests.Session` open for its whole lifetime so that
connections are pooled between calls.

The client exposes high‑level methods for the operations required by
the interactive console:

* :meth:`PeopleDirectoryAPI.list_people` – return every person.
* :meth:`PeopleDirectoryAPI.search_people` – case‑insensitive search on
  first and last name, evaluated by the server through ``$filter``.
* :meth:`PeopleDirectoryAPI.get_person` – fetch a single person by user
  name.
* :meth:`PeopleDirectoryAPI.update_person` – send a modified person back.
* :meth:`PeopleDirectoryAPI.delete_person` – remove a person.

Collection reads raise :class:`TransportError` when the server answers
with a non‑success status.  Single reads treat every non‑success status
as "not found" and return ``None``.  Writes report success as a boolean
derived from the status class only.

The client supports optional authentication via an API key which will
be sent in the ``Authorization`` header.  To enable this behaviour,
initialise the client with ``api_key='<your token>'``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel

from people_directory.schemas import PeopleEnvelope, Person


logger = logging.getLogger(__name__)

PEOPLE_PATH = "/People"

ModelT = TypeVar("ModelT", bound=BaseModel)


class TransportError(Exception):
    """The remote call could not be completed successfully.

    Attributes:
        message: Human readable description of the failure.
        status_code: HTTP status of the response, or ``None`` when no
            response was received (connection errors, timeouts).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_search_filter(term: Optional[str]) -> str:
    """Build the ``$filter`` expression for a name search.

    Returns an empty string when ``term`` is ``None`` or blank, which
    callers take as "no filter".  The term is interpolated verbatim.
    """
    if term is None or not term.strip():
        return ""
    return (
        f"contains(tolower(FirstName), tolower('{term}')) "
        f"or contains(tolower(LastName), tolower('{term}'))"
    )


def person_path(user_name: str) -> str:
    """Return the entity path for ``user_name``, e.g. ``/People('jdoe')``."""
    return f"{PEOPLE_PATH}('{user_name}')"


class PeopleDirectoryAPI:
    """Client for interacting with the people directory API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Root URL of the service, e.g.
                ``https://example.com/odata``.  ``People`` is appended to it.
            api_key: Optional API key.  If set, an ``Authorization``
                header with the value ``Bearer <api_key>`` will be
                included in all requests.
            timeout: Timeout in seconds applied to every request.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def __enter__(self) -> "PeopleDirectoryAPI":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the pooled connections held by the session."""
        self.session.close()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> requests.Response:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``PATCH``, ``DELETE``, etc.).
            path: Path relative to :attr:`base_url`, optionally carrying
                an already encoded query string.
            json_body: JSON body to send with the request.
        Returns:
            The raw response, whatever its status.  Interpreting the
            status is left to the calling operation.
        Raises:
            TransportError: if no response could be obtained.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        logger.debug("%s %s answered %s", method, url, response.status_code)
        return response

    @staticmethod
    def _is_success(response: requests.Response) -> bool:
        return 200 <= response.status_code < 300

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract a readable error message from a failed response."""
        message: Any = ""
        try:
            err_json = response.json()
        except ValueError:
            err_json = None
        if isinstance(err_json, dict):
            # OData services wrap errors as {"error": {"code": ..., "message": ...}}
            error = err_json.get("error")
            if isinstance(error, dict):
                message = error.get("message") or ""
            message = message or err_json.get("detail") or err_json.get("message") or ""
        if not message:
            message = response.text or response.reason or ""
        return str(message)

    def _decode(self, method: str, path: str, response: requests.Response, model: Type[ModelT]) -> ModelT:
        # pydantic's ValidationError and requests' JSONDecodeError are both ValueErrors.
        try:
            return model.model_validate(response.json())
        except ValueError as exc:
            logger.error("Malformed response for %s %s: %s", method, path, exc)
            raise TransportError(
                f"{method} {path} returned a malformed response", response.status_code
            ) from exc

    def _fetch_people(self, path: str) -> List[Person]:
        response = self._request("GET", path)
        if not self._is_success(response):
            message = self._error_message(response)
            logger.error("API request failed (%s): %s", response.status_code, message)
            raise TransportError(
                f"GET {path} failed with status {response.status_code}: {message}",
                response.status_code,
            )
        envelope = self._decode("GET", path, response, PeopleEnvelope)
        return list(envelope.value)

    # ------------------------------------------------------------------
    # People operations
    # ------------------------------------------------------------------
    def list_people(self) -> List[Person]:
        """Retrieve every person in the directory.

        Returns:
            The decoded people; empty when the envelope has no ``value``.
        Raises:
            TransportError: on a non‑success status or transport failure.
        """
        return self._fetch_people(PEOPLE_PATH)

    def search_people(self, term: Optional[str]) -> List[Person]:
        """Search people whose first or last name contains ``term``.

        A blank or missing term behaves exactly like :meth:`list_people`.
        """
        search_filter = build_search_filter(term)
        if not search_filter:
            return self.list_people()
        encoded = quote(search_filter, safe="")
        return self._fetch_people(f"{PEOPLE_PATH}?$filter={encoded}")

    def get_person(self, user_name: str) -> Optional[Person]:
        """Retrieve a single person by user name.

        Returns:
            The person, or ``None`` for any non‑success status.
        """
        path = person_path(user_name)
        response = self._request("GET", path)
        if not self._is_success(response):
            logger.warning("Lookup of %r answered %s; treating as not found", user_name, response.status_code)
            return None
        return self._decode("GET", path, response, Person)

    def update_person(self, person: Person) -> bool:
        """Send the full ``person`` to the server with PATCH.

        Returns:
            ``True`` if the server answered with a success status.
        """
        response = self._request("PATCH", person_path(person.user_name), json_body=person.to_payload())
        if not self._is_success(response):
            logger.warning("Update of %r answered %s", person.user_name, response.status_code)
        return self._is_success(response)

    def delete_person(self, user_name: str) -> bool:
        """Delete the person identified by ``user_name``.

        Returns:
            ``True`` if the server answered with a success status.
        """
        response = self._request("DELETE", person_path(user_name))
        if not self._is_success(response):
            logger.warning("Delete of %r answered %s", user_name, response.status_code)
        return self._is_success(response)
