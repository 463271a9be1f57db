"""Web API for verbario."""
