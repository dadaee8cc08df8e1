"""Input/output helpers: remote fetching and upload paths."""
