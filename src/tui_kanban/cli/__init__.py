"""Command line interface and the interactive terminal front end."""
