"""HTTP API for the FM tracking monitor."""
