"""
Command backends, free of any Discord types.

- **http_client.py**: Shared aiohttp session with timeout and error mapping.
- **html_extract.py**: Small HTML tree used by the scrapers.
- **cve_service.py**, **jep_service.py**, **opcode_service.py**,
  **github_service.py**: Remote lookups, each served through a lookup cache.
- **crypto_service.py**, **encoding_service.py**, **color_service.py**:
  Local computations.
"""
