"""HTTP client for the rental reporting API (booking, rent-out, return, locations)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from leadsync.errors import UpstreamError
from leadsync.services.client_mapping.envelopes import extract_payload


class ReportApiClient:
    """Thin wrapper around the reporting endpoints. Every failure is an UpstreamError."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logging.getLogger("reporting.client")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json-patch+json",
            "accept": "text/plain",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, endpoint: str, body: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method, url, headers=self._headers(), json=body, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.HTTPError as http_err:
            self.logger.error("Reporting API returned an HTTP error for %s: %s", url, http_err)
            raise UpstreamError(f"HTTP error: {http_err}") from http_err
        except requests.exceptions.ConnectionError as conn_err:
            self.logger.error("Could not connect to the reporting API at %s: %s", url, conn_err)
            raise UpstreamError(f"Connection error: {conn_err}") from conn_err
        except requests.exceptions.Timeout as timeout_err:
            self.logger.error("Reporting API timed out for %s: %s", url, timeout_err)
            raise UpstreamError(f"Timeout error: {timeout_err}") from timeout_err
        except requests.exceptions.RequestException as req_err:
            self.logger.error("Unexpected reporting API error for %s: %s", url, req_err)
            raise UpstreamError(f"Request error: {req_err}") from req_err
        except ValueError as json_err:
            self.logger.error("Reporting API sent a non-JSON body for %s: %s", url, json_err)
            raise UpstreamError(f"Invalid JSON: {json_err}") from json_err

    def fetch_report(
        self,
        endpoint: str,
        location_id: str,
        months: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        booking_no: str = "",
    ) -> List[Dict[str, Any]]:
        """
        Fetch one report page for one location.

        Args:
            endpoint (str): Report path, e.g. ``/api/Reports/GetBookingReport``.
            location_id (str): Upstream location id.
            months (Optional[int]): Look-back window in months.
            date_from (Optional[str]): Explicit window start, overrides ``months`` upstream.
            date_to (Optional[str]): Explicit window end.
            booking_no (str): Restrict the report to one booking number.

        Returns:
            List[Dict[str, Any]]: The unwrapped records, possibly empty.
        """

        body = {
            "bookingNo": booking_no,
            "dateFrom": date_from or "",
            "dateTo": date_to or "",
            "userName": "",
            "months": str(months) if months else "",
            "fromLocation": "",
            "userID": "",
            "locationID": str(location_id),
        }
        data = self._request("POST", endpoint, body)
        if isinstance(data, dict) and data.get("status") is False:
            description = data.get("errorDescription")
            if description:
                self.logger.warning(
                    "Reporting API flagged location %s: %s", location_id, description
                )
        return extract_payload(data)

    def fetch_locations(self, endpoint: str) -> List[Dict[str, Any]]:
        """Fetch the upstream location list."""

        return extract_payload(self._request("GET", endpoint))
