"""Parameter profile store backed by YAML files and pydantic models."""
