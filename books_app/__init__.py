"""Client-side tooling for the Books sample: HTTP client, CLI and local server."""
