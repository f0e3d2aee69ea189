"""Apply groovy scripts and Configuration as Code YAML to Jenkins, once per change."""

__version__ = "0.1.0"
__all__ = ["casc", "constants", "event", "groovy", "log"]