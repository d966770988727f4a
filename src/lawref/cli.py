import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from .config import CACHE_DIR, DEFAULT_JOBS, ELI_BASE_URI, OUTPUT_DIR

app = typer.Typer(add_completion=False)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def build_table(
    out: Path = typer.Option(Path("laws.csv"), help="Output CSV path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Fetch the e-Gov law list and write the law-name table (CSV).
    """
    from .client.egov import EGovClient
    from .core.law_table import LawNameTable

    _setup_logging(verbose)
    table = LawNameTable.from_law_list(EGovClient().fetch_law_list())
    table.write_csv(out)
    typer.echo(f"{len(table.laws)} laws -> {out}")


@app.command()
def extract(
    laws: Path = typer.Option(..., help="Path to law-name table (CSV)"),
    input_dir: Optional[Path] = typer.Option(None, "--input", help="Directory of e-Gov law data (.json / .xml)"),
    targets: Optional[Path] = typer.Option(None, help="Path to targets.yaml (law IDs to fetch)"),
    out: Path = typer.Option(OUTPUT_DIR, help="Output directory"),
    jobs: int = typer.Option(DEFAULT_JOBS, help="Number of worker processes"),
    structure: bool = typer.Option(False, help="Also write containment edges"),
    eli_base: str = typer.Option(ELI_BASE_URI, help="Base URI of ELI identifiers"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Extract cross-references from law documents.

    --input: 保存済みの法令データを処理
    --targets: e-Gov API v2 から取得して処理
    """
    from .core.law_table import LawNameTable
    from .core.output import ReferenceWriter
    from .core.runner import collect_sources, fetch_targets, load_targets, run_batch

    if (input_dir is None) == (targets is None):
        raise typer.BadParameter("Specify exactly one of --input or --targets.")
    if jobs < 1:
        raise typer.BadParameter(f"Invalid jobs: {jobs}. Must be >= 1.")
    if input_dir is not None and not input_dir.is_dir():
        raise typer.BadParameter(f"Not a directory: {input_dir}")

    _setup_logging(verbose)
    table = LawNameTable.from_csv(laws)

    if targets is not None:
        sources = fetch_targets(load_targets(targets), CACHE_DIR / "law_data")
    else:
        sources = collect_sources(input_dir)

    writer = ReferenceWriter(base=eli_base, include_structure=structure)
    report = run_batch(sources, table, out, jobs=jobs, writer=writer)
    typer.echo(f"success: {len(report['success'])}, failed: {len(report['failed'])}")


@app.command()
def show(
    source: Path = typer.Argument(..., help="e-Gov law data file (.json / .xml)"),
    laws: Path = typer.Option(..., help="Path to law-name table (CSV)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Print the references of one document as JSON lines.
    """
    from .core.document import LawDocument
    from .core.extractor import extract_references
    from .core.law_table import LawNameTable
    from .core.output import reference_to_record

    _setup_logging(verbose)
    table = LawNameTable.from_csv(laws)
    document = LawDocument.load(source)
    for ref in extract_references(document.ordered_paragraphs(), table):
        sys.stdout.write(json.dumps(reference_to_record(ref), ensure_ascii=False) + "\n")


if __name__ == "__main__":
    app()
