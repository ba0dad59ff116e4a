"""
CLI commands subpackage.

Re-exports all command handlers for use by main.py.
"""

from hmclient.cli.commands.inspection import cmd_evaluate, cmd_scenario
from hmclient.cli.commands.run_management import cmd_run

__all__ = [
    "cmd_run",
    "cmd_scenario",
    "cmd_evaluate",
]
