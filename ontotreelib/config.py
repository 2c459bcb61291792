"""Configuration system for OntoTreeLib.

This module defines how users describe the remote hierarchy they browse,
how long fetched data stays fresh, and how aggressively the browser
reads ahead of the user.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple


class EntityKind(Enum):
    """The three kinds of data fetched from the remote hierarchy.

    Each kind owns its own cache namespace, its own dedup key prefix,
    its own remote path and its own fallback value on failure.
    """
    NODE = "term"           # A single hierarchy node
    CHILDREN = "children"   # Child edges of a node
    LEAVES = "strains"      # Leaf records annotated to a node

    @property
    def key_prefix(self) -> str:
        return self.value

    def path_for(self, encoded_id: str) -> str:
        """Build the remote path for an already percent-encoded id."""
        if self is EntityKind.NODE:
            return f"/go/{encoded_id}"
        if self is EntityKind.CHILDREN:
            return f"/go/children/{encoded_id}"
        return f"/go/{encoded_id}/mmrrc-strains"

    def fallback(self) -> Any:
        """Value returned when no data could be obtained."""
        if self is EntityKind.NODE:
            return None  # "not found" is a terminal state, not an error
        return []


class ErrorKind(Enum):
    """User-visible failure states handed to the presenter."""
    NOT_FOUND = "not_found"
    CHILDREN_FAILED = "children_failed"
    ROOTS_FAILED = "roots_failed"


DEFAULT_INITIAL_LEAF_COUNT = 100

DEFAULT_ROOT_IDS: Tuple[str, ...] = (
    "GO:0008150",  # biological_process
    "GO:0005575",  # cellular_component
    "GO:0003674",  # molecular_function
)


@dataclass
class CacheConfig:
    """Expiry settings shared by all three cache namespaces."""

    ttl: float = 30 * 60.0             # Seconds an entry stays fresh
    sweep_interval: float = 5 * 60.0   # Seconds between background sweeps

    def validate(self) -> List[str]:
        errors = []
        if self.ttl <= 0:
            errors.append("ttl must be positive")
        if self.sweep_interval <= 0:
            errors.append("sweep_interval must be positive")
        elif self.sweep_interval >= self.ttl:
            errors.append("sweep_interval must be shorter than ttl")
        return errors


@dataclass
class PrefetchConfig:
    """Readahead heuristics.

    These values were picked for a responsive feel, not load-tested.
    Tune them per deployment.
    """

    readahead_max_children: int = 5      # Only read ahead below narrow nodes
    readahead_delay: float = 0.5         # Debounce before grandchildren fetch
    root_preload_delay: float = 1.0      # Delay before first-level preload
    enabled: bool = True

    def validate(self) -> List[str]:
        errors = []
        if self.readahead_max_children < 0:
            errors.append("readahead_max_children cannot be negative")
        if self.readahead_delay < 0:
            errors.append("readahead_delay cannot be negative")
        if self.root_preload_delay < 0:
            errors.append("root_preload_delay cannot be negative")
        return errors


@dataclass
class BrowserConfig:
    """Complete configuration for a browsing session.

    This is the primary way users point the browser at a backend.
    """

    base_url: str = "http://localhost:3000/api"
    root_ids: Tuple[str, ...] = DEFAULT_ROOT_IDS
    request_timeout: Optional[float] = 10.0
    initial_leaf_count: int = DEFAULT_INITIAL_LEAF_COUNT
    leaf_catalog_url: str = "https://www.mmrrc.org/catalog/sds.php?mmrrc_id={leaf_id}"

    cache: CacheConfig = field(default_factory=CacheConfig)
    prefetch: PrefetchConfig = field(default_factory=PrefetchConfig)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'BrowserConfig':
        """Create config from ``ONTOTREE_*`` environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            BrowserConfig with any overrides applied
        """
        env = os.environ if environ is None else environ
        config = cls()
        if env.get("ONTOTREE_API_URL"):
            config.base_url = env["ONTOTREE_API_URL"]
        if env.get("ONTOTREE_CACHE_TTL"):
            config.cache.ttl = float(env["ONTOTREE_CACHE_TTL"])
            config.cache.sweep_interval = min(config.cache.sweep_interval, config.cache.ttl / 6)
        if env.get("ONTOTREE_REQUEST_TIMEOUT"):
            config.request_timeout = float(env["ONTOTREE_REQUEST_TIMEOUT"])
        return config

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not self.base_url:
            errors.append("base_url is required")
        if self.request_timeout is not None and self.request_timeout <= 0:
            errors.append("request_timeout must be positive")
        if self.initial_leaf_count <= 0:
            errors.append("initial_leaf_count must be positive")
        errors.extend(self.cache.validate())
        errors.extend(self.prefetch.validate())
        return errors
