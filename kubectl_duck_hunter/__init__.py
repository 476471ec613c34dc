"""Find the cluster resources that implement a duck type."""

__version__ = "0.1.0"
