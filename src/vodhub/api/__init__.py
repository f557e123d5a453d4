"""HTTP API for vodhub."""
