"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

PROGRAM_NAME = "schema_types_to_code"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    # Try to get current Click context for parameter values
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    cmd_parts = [PROGRAM_NAME]
    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if value is None or value == "":
            continue

        # Skip options left at their default value
        if isinstance(param, click.Option) and value == param.default:
            continue

        if isinstance(value, (str, Path)):
            path_obj = Path(str(value))
            # File paths are shown by name only
            formatted_value = path_obj.name if path_obj.exists() else str(value)
        elif isinstance(value, bool):
            formatted_value = ""
        else:
            formatted_value = str(value)

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)
        elif isinstance(param, click.Option):
            if param.is_flag:
                # Boolean flags with a secondary "--no-x" form
                if not value and param.secondary_opts:
                    options.append(param.secondary_opts[0])
                elif value:
                    options.append(param.opts[0])
            else:
                flag = param.opts[0] if param.opts else f"--{param_name}"
                options.extend([flag, formatted_value])

    cmd_parts.extend(arguments)
    cmd_parts.extend(options)

    return " ".join(cmd_parts)


def generation_comment(click_command: click.Command, version: str) -> str:
    """The comment line heading every generated file."""
    return f"// Generated by {PROGRAM_NAME} v{version} : {reconstruct_command_line(click_command)}"
