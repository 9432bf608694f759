"""
Caching proxy service package.

The proxy turns a posted request description into an upstream GET,
recording the response under a fingerprint of the request so equivalent
requests within the cache TTL are replayed from the store.

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.domain: Request description, cached response, body decoder.
- app.fingerprint: Canonical 64-bit request fingerprints.
- app.caching: Store protocol, Redis store, response codec and cache.
- app.adapters: Upstream HTTP client.
- app.proxy: Read-through orchestration.
"""
