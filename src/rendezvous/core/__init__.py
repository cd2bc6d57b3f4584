"""Core types shared by the pipeline, validation and interaction cache."""
