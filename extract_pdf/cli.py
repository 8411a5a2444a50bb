"""CLI interface for the PDF extraction stage."""

import json
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    PROPERTY_END_PAGE,
    PROPERTY_OPERATION,
    PROPERTY_START_PAGE,
    SUPPORTED_PROPERTIES,
    StageConfig,
)
from .processor import (
    MIME_TYPE_ATTRIBUTE,
    PDF_MIME_TYPE,
    REGION_ATTRIBUTE,
    ExtractPDFProcessor,
)
from .session import FAILURE, SUCCESS, MemorySession
from .utils import output_filename, setup_logging

# Load environment variables
load_dotenv()

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="extract-pdf")
def cli() -> None:
    """Extract PDF CLI - Extract text, region text or HTML from PDF files."""
    pass


def _parse_region_option(value: str) -> Tuple[str, str]:
    name, sep, coords = value.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(
            f"Expected NAME=x,y,width,height, got '{value}'", param_hint="--region"
        )
    return name.strip(), coords.strip()


def build_properties(
    operation: Optional[str],
    start_page: Optional[int],
    end_page_subtractor: Optional[int],
    regions: Tuple[str, ...],
) -> Dict[str, str]:
    """Merge environment defaults, command line options and regions."""
    properties = StageConfig.env_defaults()
    if operation is not None:
        properties[PROPERTY_OPERATION] = operation
    if start_page is not None:
        properties[PROPERTY_START_PAGE] = str(start_page)
    if end_page_subtractor is not None:
        properties[PROPERTY_END_PAGE] = str(end_page_subtractor)
    for value in regions:
        name, coords = _parse_region_option(value)
        properties[name] = coords
    return properties


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default="./output",
    help="Output directory for extracted records",
)
@click.option(
    "--operation",
    type=str,
    help=(
        "Extraction operation: TextStripper, TextStripperByArea or Text2HTML "
        "(default: Text2HTML)"
    ),
)
@click.option("--start-page", type=int, help="Page where to start extraction")
@click.option(
    "--end-page-subtractor",
    type=int,
    help="Pages subtracted from the page count to determine the last page",
)
@click.option(
    "--region",
    "regions",
    multiple=True,
    help="Named area as NAME=x,y,width,height (repeatable)",
)
@click.option(
    "--mime-type",
    default=PDF_MIME_TYPE,
    help="Declared mime type of the input record",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def extract(
    input_path: str,
    output_dir: str,
    operation: Optional[str],
    start_page: Optional[int],
    end_page_subtractor: Optional[int],
    regions: Tuple[str, ...],
    mime_type: str,
    verbose: bool,
) -> None:
    """Extract text from a PDF file into one file per output record."""
    setup_logging(verbose)

    input_path_obj = Path(input_path)
    output_dir_obj = Path(output_dir)

    properties = build_properties(operation, start_page, end_page_subtractor, regions)
    processor = ExtractPDFProcessor(properties)

    problems = processor.validate()
    if problems:
        for problem in problems:
            console.print(f"[red]Configuration error: {problem}[/red]")
        sys.exit(1)

    session = MemorySession()
    session.enqueue(
        input_path_obj.read_bytes(),
        {MIME_TYPE_ATTRIBUTE: mime_type, "filename": input_path_obj.name},
    )

    console.print(f"[green]PDF file:[/green] {input_path_obj}")
    console.print(
        f"[green]Operation:[/green] {StageConfig.from_properties(properties).operation.value}"
    )

    processor.on_trigger(session)

    if session.transferred[FAILURE.name]:
        console.print(
            f"[red]Extraction failed for {input_path_obj}; see log for details[/red]"
        )
        sys.exit(1)

    output_dir_obj.mkdir(parents=True, exist_ok=True)
    outputs = []
    for idx, flowfile in enumerate(session.transferred[SUCCESS.name], start=1):
        name = output_filename(
            idx,
            flowfile.get_attribute(MIME_TYPE_ATTRIBUTE),
            flowfile.get_attribute(REGION_ATTRIBUTE),
        )
        (output_dir_obj / name).write_bytes(flowfile.content)
        outputs.append(
            {
                "file": name,
                "mime_type": flowfile.get_attribute(MIME_TYPE_ATTRIBUTE),
                "region": flowfile.get_attribute(REGION_ATTRIBUTE),
                "bytes": len(flowfile.content),
            }
        )

    summary = {
        "source_file": str(input_path_obj),
        "output_directory": str(output_dir_obj),
        "record_count": len(outputs),
        "config": StageConfig.from_properties(properties).to_dict(),
        "outputs": outputs,
    }
    with open(output_dir_obj / "extraction_summary.json", "w", encoding="utf-8") as f:
        json.dump(summary, f, indent=2, ensure_ascii=False)

    console.print(
        f"[green]Extraction complete:[/green] Saved {len(outputs)} records to "
        f"{output_dir_obj}"
    )


@cli.command(name="properties")
def list_properties() -> None:
    """List the supported processor properties."""
    table = Table(title="Supported properties")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Default")
    table.add_column("Allowed values")
    table.add_column("Description")
    for descriptor in SUPPORTED_PROPERTIES:
        table.add_row(
            descriptor.name,
            descriptor.default,
            ", ".join(descriptor.allowable_values) or "-",
            descriptor.description,
        )
    console.print(table)
    console.print(
        "[cyan]Any other property NAME=x,y,width,height declares a region "
        "for TextStripperByArea.[/cyan]"
    )


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
