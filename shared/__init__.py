"""
Shared utilities for the caching proxy.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error kinds
- base_service: FastAPI service skeleton (health, metrics, error handlers)
- test_helpers: In-memory doubles for the store and the upstream

Do not import from service_* packages into shared/.
"""
