"""
Startup Module.

Explicit, idempotent construction of the services used by triggers.

Usage:
    from startup import get_service_bundle

    bundle = get_service_bundle()

Exports:
    ServiceBundle: Immutable bundle of services
    build_service_bundle: Build a bundle from a config
    get_service_bundle: Process-wide bundle, built on first use
    reset_service_bundle: Drop the cached bundle
"""

from .service_bundle import (
    ServiceBundle,
    build_service_bundle,
    get_service_bundle,
    reset_service_bundle,
)

__all__ = [
    'ServiceBundle',
    'build_service_bundle',
    'get_service_bundle',
    'reset_service_bundle',
]
