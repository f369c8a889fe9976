"""Infrastructure: persistence, cache, security and store implementations."""
