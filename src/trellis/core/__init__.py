"""Core engine: configuration, utilities and the template composition system."""
