"""
Configuration Module
====================

Centralized configuration for the HyperGraphQL core.

Example:
    from hypergraphql import HyperGraphQLConfig, HyperGraphManager

    config = HyperGraphQLConfig(default_org="acme", max_query_depth=3)
    manager = HyperGraphManager(config=config)

    # Or start from the environment and override selectively
    config = get_config(default_limit=50)
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

DEFAULT_ORG = "rzonedevops"

# Paths the wire layer mounts its handlers under
ENDPOINTS: Dict[str, str] = {
    'graphql': '/api/graphql',
    'sync': '/api/sync',
    'projections': '/api/projections',
    'organizations': '/api/organizations',
    'scale': '/api/scale',
}


@dataclass
class HyperGraphQLConfig:
    """
    Configuration settings for the hypergraph core.

    Attributes:
        default_org: Organization used when neither the call nor the query
            context names one.
        cache_ttl: Seconds a caller-side cache may hold results. The core
            itself never caches.
        max_query_depth: Upper bound applied to navigation depth by the
            manager facade.
        default_limit: Page size used by list operations when none is given.
    """

    default_org: str = DEFAULT_ORG
    cache_ttl: int = 3600
    max_query_depth: int = 5
    default_limit: int = 100

    def __post_init__(self):
        """Validate configuration values after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate configuration values are within acceptable ranges.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        if not self.default_org:
            raise ValueError("default_org must be a non-empty string")
        if self.cache_ttl < 0:
            raise ValueError(
                f"cache_ttl must be non-negative, got {self.cache_ttl}"
            )
        if self.max_query_depth < 0:
            raise ValueError(
                f"max_query_depth must be non-negative, got {self.max_query_depth}"
            )
        if self.default_limit < 1:
            raise ValueError(
                f"default_limit must be at least 1, got {self.default_limit}"
            )

    def copy(self) -> 'HyperGraphQLConfig':
        """Create a copy of this configuration."""
        return HyperGraphQLConfig(**self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HyperGraphQLConfig':
        """
        Create configuration from a dictionary.

        Unknown keys are ignored so configs written by newer versions
        still load.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'HyperGraphQLConfig':
        """
        Create configuration from environment variables.

        Reads DEFAULT_ORG, HYPERGRAPHQL_CACHE_TTL, HYPERGRAPHQL_MAX_QUERY_DEPTH
        and HYPERGRAPHQL_DEFAULT_LIMIT; missing variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls(default_org=env.get('DEFAULT_ORG') or DEFAULT_ORG)
        if 'HYPERGRAPHQL_CACHE_TTL' in env:
            config.cache_ttl = int(env['HYPERGRAPHQL_CACHE_TTL'])
        if 'HYPERGRAPHQL_MAX_QUERY_DEPTH' in env:
            config.max_query_depth = int(env['HYPERGRAPHQL_MAX_QUERY_DEPTH'])
        if 'HYPERGRAPHQL_DEFAULT_LIMIT' in env:
            config.default_limit = int(env['HYPERGRAPHQL_DEFAULT_LIMIT'])
        config._validate()
        return config


def get_config(**overrides) -> HyperGraphQLConfig:
    """
    Get configuration from the environment with explicit overrides applied.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        Validated HyperGraphQLConfig
    """
    data = HyperGraphQLConfig.from_env().to_dict()
    data.update(overrides)
    return HyperGraphQLConfig.from_dict(data)


def get_default_config() -> HyperGraphQLConfig:
    """Get the default configuration, ignoring the environment."""
    return HyperGraphQLConfig()
