"""CVE lookups against the NVD 2.0 REST API."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from arisa.cache.lookup_cache import LookupCache
from arisa.datatypes.lookup_datatypes import CveRecord, CveReference, CvssScore
from arisa.errors import FetchError, InvalidFormat
from arisa.services.http_client import HttpClient

NVD_API_URL = "https://services.nvd.nist.gov/rest/json/cves/2.0"
NVD_DETAIL_URL = "https://nvd.nist.gov/vuln/detail/{cve_id}"

_CVE_ID = re.compile(r"^CVE-\d{4}-\d{4,}$")
_BARE_ID = re.compile(r"^[\d-]+$")

MAX_DESCRIPTION = 500
MAX_PRODUCTS = 5


def normalize_cve_id(raw: str) -> str:
    """Return ``raw`` as an upper-case ``CVE-YYYY-NNNN`` identifier.

    Bare ``YYYY-NNNN`` input gets the prefix added.

    Raises
    ------
    InvalidFormat
        When the input cannot be a CVE identifier.
    """
    clean = raw.strip().upper()
    if not clean.startswith("CVE-") and _BARE_ID.match(clean):
        clean = f"CVE-{clean}"
    if _CVE_ID.match(clean):
        return clean
    raise InvalidFormat("Expected format: CVE-YYYY-NNNN (e.g., CVE-2019-16863)")


def severity_from_score(score: float) -> str:
    if score == 0.0:
        return "None"
    if 0.1 <= score <= 3.9:
        return "Low"
    if 4.0 <= score <= 6.9:
        return "Medium"
    if 7.0 <= score <= 8.9:
        return "High"
    if 9.0 <= score <= 10.0:
        return "Critical"
    return "Unknown"


def _english(descriptions: List[Dict[str, Any]] | None) -> Optional[str]:
    for entry in descriptions or []:
        if entry.get("lang") == "en":
            return entry.get("value")
    return None


def best_cvss_score(metrics: Dict[str, Any] | None) -> Optional[CvssScore]:
    """Pick the first CVSS v3.1 metric, else v3.0, else v2."""
    if not metrics:
        return None
    for key in ("cvssMetricV31", "cvssMetricV30", "cvssMetricV2"):
        entries = metrics.get(key) or []
        if not entries:
            continue
        metric = entries[0]
        data = metric.get("cvssData") or {}
        score = float(data.get("baseScore", 0.0))
        # v2 metrics keep severity outside cvssData and it is not comparable to v3
        severity = None if key == "cvssMetricV2" else metric.get("baseSeverity") or data.get("baseSeverity")
        return CvssScore(
            base_score=score,
            version=f"v{data.get('version', '?')}",
            severity=str(severity).title() if severity else severity_from_score(score),
        )
    return None


def parse_cve(payload: Dict[str, Any], cve_id: str) -> CveRecord:
    """Build a :class:`CveRecord` from an NVD API response body.

    Raises
    ------
    FetchError
        When the response contains no vulnerability.
    """
    vulnerabilities = payload.get("vulnerabilities") or []
    if not vulnerabilities:
        raise FetchError(f"CVE {cve_id} not found in database")

    cve = vulnerabilities[0].get("cve") or {}

    weaknesses = tuple(
        text
        for weakness in cve.get("weaknesses") or []
        if (text := _english(weakness.get("description")))
    )
    configurations = tuple(
        tuple(
            tuple(match.get("criteria", "") for match in node.get("cpeMatch") or [])
            for node in config.get("nodes") or []
        )
        for config in cve.get("configurations") or []
    )
    references = tuple(
        CveReference(url=ref.get("url", ""), tags=tuple(ref.get("tags") or ()))
        for ref in cve.get("references") or []
    )

    return CveRecord(
        cve_id=cve.get("id", cve_id),
        vuln_status=cve.get("vulnStatus"),
        published=cve.get("published"),
        last_modified=cve.get("lastModified"),
        description=_english(cve.get("descriptions")),
        cvss=best_cvss_score(cve.get("metrics")),
        weaknesses=weaknesses,
        configurations=configurations,
        references=references,
    )


async def fetch_cve(http: HttpClient, cve_id: str) -> CveRecord:
    payload = await http.get_json(NVD_API_URL, params={"cveId": cve_id})
    if not isinstance(payload, dict):
        raise FetchError(f"Unexpected NVD response for {cve_id}")
    return parse_cve(payload, cve_id)


async def lookup_cve(cache: LookupCache[CveRecord], http: HttpClient, raw_id: str) -> CveRecord:
    """Normalize ``raw_id`` and return its record, fetching on a cache miss."""
    cve_id = normalize_cve_id(raw_id)
    return await cache.get_or_fetch(cve_id, lambda: fetch_cve(http, cve_id))


# -------------------- Formatting --------------------

def product_from_cpe(cpe: str) -> str:
    """Turn ``cpe:2.3:a:vendor:product:...`` into ``vendor product``."""
    parts = cpe.split(":")
    if len(parts) < 5:
        return cpe
    vendor, product = parts[3], parts[4]
    if vendor != "*" and product != "*":
        return f"{vendor} {product}"
    if product != "*":
        return product
    return cpe


def _affected_products(record: CveRecord) -> Tuple[List[str], bool]:
    products: List[str] = []
    for config in record.configurations[:2]:
        for node in config:
            for criteria in node[:3]:
                if len(products) >= MAX_PRODUCTS:
                    return products, True
                products.append(product_from_cpe(criteria))
    return products, len(products) >= MAX_PRODUCTS


def _date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except ValueError:
        return None


def format_cve(record: CveRecord, detailed: bool = False) -> Tuple[str, str]:
    """Return ``(title, description)`` for the CVE embed."""
    lines: List[str] = []

    if record.vuln_status:
        lines.append(f"**Status:** {record.vuln_status}")
    if published := _date(record.published):
        lines.append(f"**Published:** {published}")
    if record.cvss:
        lines.append(f"**CVSS Score:** {record.cvss.base_score} ({record.cvss.version}) - {record.cvss.severity}")

    body = "\n".join(lines) + ("\n" if lines else "")

    if record.description:
        text = record.description
        if len(text) > MAX_DESCRIPTION:
            text = text[:MAX_DESCRIPTION] + "..."
        body += f"\n**Description:**\n{text}\n"

    if detailed:
        if record.weaknesses:
            body += "\n**Weaknesses:**\n" + "".join(f"• {w}\n" for w in record.weaknesses[:3])
        if record.configurations:
            products, truncated = _affected_products(record)
            body += "\n**Affected Products:**\n" + "".join(f"• {p}\n" for p in products)
            if truncated:
                body += "• ... and more\n"

    body += f"\n**NVD Link:** {NVD_DETAIL_URL.format(cve_id=record.cve_id)}"

    advisory = next((ref for ref in record.references if ref.is_advisory), None)
    if advisory:
        body += f"\n**Vendor Advisory:** {advisory.url}"

    return record.cve_id, body
