"""Infrastructure shared by every feature: logging, caching, introspection."""
