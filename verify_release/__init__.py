"""verify-release — check that a freshly published provider SDK installs and previews."""

__version__ = "0.1.0"
