"""Files on disk: project manifest, project version and upm config."""
