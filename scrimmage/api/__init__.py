"""HTTP API for running plays."""
