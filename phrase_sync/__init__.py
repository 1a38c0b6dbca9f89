"""Synchronize Phrase translations with an Azure DevOps repository."""

__version__ = "1.0.0"
