"""CLI command implementations for the foilplan application.

This package contains subcommands for the foilplan CLI, including:
- validate: Validate a planning input file
"""

from foilplan.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "validate_command"]
