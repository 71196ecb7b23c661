import json
import logging

import click

from . import __version__
from .cli_utils import generation_comment
from .pipeline import CodeGeneratorConfig, GeneratorError, OutputMode, PipelineGenerator, load_definitions_file

DUPLICATE_CHOICES = ["None", "Model", "Input", "All"]
REEXPORT_CHOICES = ["None", "Directories", "All"]


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--combine-scalar-filters/--no-combine-scalar-filters",
    default=None,
    help="Merge nullable and nested scalar filters into one filter per scalar",
)
@click.option(
    "--atomic-number-operations/--no-atomic-number-operations",
    default=None,
    help="Keep *FieldUpdateOperationsInput types (increment, decrement, ...)",
)
@click.option(
    "--rename-zoo-types/--no-rename-zoo-types",
    default=None,
    help="Rename types whose names collide with platform built-ins",
)
@click.option(
    "--remove-duplicate-types",
    default=None,
    type=click.Choice(DUPLICATE_CHOICES, case_sensitive=False),
    help="Fold structurally identical types",
)
@click.option("--output-file-pattern", "-p", default=None, type=str, help="Output path pattern, tokens: {model}, {name}, {type}")
@click.option("--reexport", default=None, type=click.Choice(REEXPORT_CHOICES, case_sensitive=False))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing files")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every pipeline stage")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def schema_types_to_code(
    config,
    combine_scalar_filters,
    atomic_number_operations,
    rename_zoo_types,
    remove_duplicate_types,
    output_file_pattern,
    reexport,
    force,
    verbose,
    path,
    output,
):
    """Generate TypeScript declarations from the type definitions in PATH into OUTPUT."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = {}
    if config is not None:
        with open(config) as f:
            try:
                options = json.load(f)
            except json.JSONDecodeError as e:
                raise click.ClickException(f"Invalid config file {config}: {e}") from e

    # CLI flags override the config file
    overrides = {
        "combine_scalar_filters": combine_scalar_filters,
        "atomic_number_operations": atomic_number_operations,
        "rename_zoo_types": rename_zoo_types,
        "remove_duplicate_types": remove_duplicate_types,
        "output_file_pattern": output_file_pattern,
        "reexport": reexport,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})

    try:
        generator_config = CodeGeneratorConfig.from_dict(options)
        if force:
            generator_config.output.mode = OutputMode.FORCE

        definitions = load_definitions_file(path)
        comment = generation_comment(schema_types_to_code, __version__)
        written = PipelineGenerator(definitions, generator_config, comment).write(output)
    except (GeneratorError, FileExistsError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated {len(written)} files in {output}")
