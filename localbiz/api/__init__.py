"""
HTTP API package.

Serves the Google Places proxy endpoints used by the web client; run with
`localbiz serve` or `uvicorn localbiz.api.app:app`.
"""
