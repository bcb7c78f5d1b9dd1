"""Command line host for the SAS URI command."""
