"""TypeScript to JavaScript doc bridge."""

__version__ = "0.1.0"
