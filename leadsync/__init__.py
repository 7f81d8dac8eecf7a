"""Lead ingestion and identity-resolution backend for the telecalling team."""
