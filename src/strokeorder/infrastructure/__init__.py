"""Infrastructure layer: file-backed lookup data, rule sources, and graphs."""
