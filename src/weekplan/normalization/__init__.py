"""Input normalization."""

from .config_resolver import DEFAULT_POLICY_CONFIG, resolve_policy
from .request import normalize_request

__all__ = ["DEFAULT_POLICY_CONFIG", "normalize_request", "resolve_policy"]
