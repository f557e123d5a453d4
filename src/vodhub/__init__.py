"""vodhub: cached, concurrent search across content-listing sites."""

__version__ = "0.1.0"
