"""Lab manager API client.

A small wrapper around the lab manager REST API built on ``requests``.
It is used by the ``lab_data.py`` backup script and can be imported by
other tools that need to read the lab's members or presentation
queue.

Every public method returns a tuple ``(data, error)``.  On success
``error`` is ``None``; on failure ``data`` is ``None`` and ``error`` is
a dictionary with the keys ``status_code`` and ``message``.  Network
problems are reported the same way with ``status_code`` set to
``None``; the client never raises for HTTP or connection errors.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class LabManagerAPI:
    """Client for interacting with the lab manager API."""

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the service, e.g. ``http://localhost:8000``.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each response.
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Dict[str, Any]]]:
        """Perform an HTTP request against ``/api/v1``.

        Returns ``(parsed JSON, None)`` on success and
        ``(None, {"status_code": ..., "message": ...})`` on failure.
        """
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": str(message)}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Lab operations
    # ------------------------------------------------------------------
    def list_members(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return the lab's current (not deleted) members."""
        data, error = self._request("GET", "/members/")
        if error:
            return [], error
        return data or [], None

    def get_rotation_queue(self) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return the presentation queue: ``upNext``, ``queue`` and ``presentedCount``."""
        return self._request("GET", "/rotation/queue")

    def export_data(self, path: Optional[str] = None) -> Tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """Download a full export and write it to ``path``.

        Without ``path`` the file is named ``lab-data-YYYY-MM-DD.json``
        after today's date and written to the working directory.
        Returns the path written.
        """
        data, error = self._request("GET", "/data/export")
        if error:
            return None, error
        target = Path(path) if path else Path(f"lab-data-{date.today().isoformat()}.json")
        try:
            target.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error("Could not write export to %s: %s", target, exc)
            return None, {"status_code": None, "message": str(exc)}
        logger.info("Exported lab data to %s", target)
        return target, None

    def import_data(self, path: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Upload an export file, replacing all data on the server.

        Returns the server's reply, which includes per-collection counts.
        """
        try:
            document = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Could not read import file %s: %s", path, exc)
            return None, {"status_code": None, "message": f"Invalid import file: {exc}"}
        return self._request("POST", "/data/import", json_body=document)

    def load_seed_data(self) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Ask the server to load the illustrative dataset into an empty lab."""
        return self._request("POST", "/data/seed")
