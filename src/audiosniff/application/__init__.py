"""Application layer: orchestration over the feature packages."""
