"""Create or update a GitHub release with a changelog built from conventional commits."""

__version__ = "3.0.3"
