"""onelo: a content-addressed cache for markdown note sources."""

__version__ = "0.1.0"
