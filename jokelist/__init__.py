"""Browse JokeAPI categories with a local cache of shrunk results."""

__version__ = "1.0.0"
