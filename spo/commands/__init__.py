"""
Commands

Each command module exposes:
    NAME, DESCRIPTION, DEFAULT_PROPERTIES, OPTION_SETS
    add_arguments(parser)
    telemetry_properties(options) -> dict
    validate(options) -> True | message
    execute(client, options) -> output record(s) or None
"""

from spo.commands import group_list, term_group_add, term_group_list, term_set_list

# Command registry: maps command names to modules
COMMAND_REGISTRY = {
    module.NAME: module
    for module in (group_list, term_group_add, term_group_list, term_set_list)
}

__all__ = ["COMMAND_REGISTRY"]
