"""Unwrap the record list from the reporting API response envelopes."""

from typing import Any, Dict, List

from leadsync.errors import UpstreamError


def extract_payload(data: Any) -> List[Dict[str, Any]]:
    """
    Return the list of records carried by a reporting API response.

    Accepted shapes, in order: a bare list, ``dataSet.data``, ``dataSet`` as a
    list, ``data`` and ``result``. A response with ``status: false`` or a null
    ``dataSet`` and no records is an empty page.

    Raises:
        UpstreamError: If the response matches none of the known shapes.
    """
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        raise UpstreamError(f"Unrecognized response envelope: {type(data).__name__}")

    dataset = data.get("dataSet")
    if isinstance(dataset, dict) and isinstance(dataset.get("data"), list):
        return dataset["data"]
    if isinstance(dataset, list):
        return dataset
    for key in ("data", "result"):
        if isinstance(data.get(key), list):
            return data[key]

    if data.get("status") is False or ("dataSet" in data and not dataset):
        return []
    if isinstance(dataset, dict) and dataset.get("data") is None:
        return []

    raise UpstreamError(
        f"Unrecognized response envelope with keys: {sorted(data.keys())}"
    )
