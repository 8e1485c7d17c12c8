"""dnvm - a version manager for dotnet SDKs."""

__version__ = "0.4.0"
