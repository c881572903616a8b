#!/usr/bin/env python3
"""Command-line interface for the Python OAS schema resolver.

Resolves a document, prints how many schemas landed in each
materialization decision and writes the Markdown manifests. Schemas and
operations that could not be resolved are listed on stderr and make the
exit status non-zero; the manifests for everything else are still written.
"""

import argparse
import contextlib
import json
import logging
import shutil
import sys
import tempfile
import traceback
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

from python_oas_generator.constants import DEFAULT_PACKAGE_NAME
from python_oas_generator.generator.filters import decision_label
from python_oas_generator.generator.template_engine import ManifestGenerator, ManifestTemplateEngine
from python_oas_generator.parser.oas_parser import OASParser, ParsedSpec
from python_oas_generator.resolver.engine import Engine, GenerationResult
from python_oas_generator.resolver.materialization import MaterializationDecision
from python_oas_generator.utils.file_utils import write_files_to_disk

EXIT_SUCCESS = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_JSON = 2
EXIT_GENERATION_ERROR = 3
EXIT_RESOLUTION_FAILURES = 4


def _spec_path(value: str) -> Path:
    path = Path(value)
    if not path.is_file():
        msg = f"Specification file not found: {path}"
        raise argparse.ArgumentTypeError(msg)
    return path


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser of the ``python-oas-generator`` command."""
    parser = argparse.ArgumentParser(
        prog="python-oas-generator",
        description="Decide which OpenAPI schemas become Python models and render the result as Markdown",
        epilog=(
            f"exit status: {EXIT_SUCCESS} everything resolved, {EXIT_RESOLUTION_FAILURES} manifests written "
            f"but some schemas or operations failed, {EXIT_INVALID_JSON} unreadable JSON, "
            f"{EXIT_GENERATION_ERROR} nothing could be generated"
        ),
    )
    parser.add_argument("spec_file", type=_spec_path, metavar="SPEC_FILE", help="OpenAPI 3.x document (JSON)")
    parser.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        type=Path,
        default=Path("./generated"),
        help="directory replaced by the rendered manifests (default: %(default)s)",
    )
    parser.add_argument(
        "-p",
        "--package-name",
        default=DEFAULT_PACKAGE_NAME,
        help="client package used in the model import lines (default: %(default)s)",
    )
    parser.add_argument("-t", "--template-dir", type=Path, help="directory overriding the bundled templates")
    parser.add_argument("-v", "--verbose", action="store_true", help="log resolver progress")
    return parser


@contextlib.contextmanager
def staged_output_dir(output_dir: Path) -> Iterator[Path]:
    """Yield a scratch directory that replaces ``output_dir`` when the block completes.

    If the block raises, the scratch directory is dropped and ``output_dir``
    keeps its previous content.
    """
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-", dir=output_dir.parent))
    try:
        yield staging
        if output_dir.exists():
            shutil.rmtree(output_dir)
        staging.rename(output_dir)
    finally:
        if staging.exists():
            shutil.rmtree(staging)


def report_decisions(spec: ParsedSpec, result: GenerationResult) -> None:
    """Print the number of schemas per materialization decision."""
    counts = Counter(result.materialization.decisions.values())
    print(f"Resolved {len(spec.graph)} schemas and {len(spec.operations)} operations")
    for decision in MaterializationDecision:
        if counts[decision]:
            print(f"  {decision_label(decision)}: {counts[decision]}")
    if spec.hoisted_schemas:
        print(f"  hoisted from inline definitions: {', '.join(spec.hoisted_schemas)}")


def report_failures(result: GenerationResult) -> None:
    for name, error in sorted(result.failures.items()):
        print(f"Schema {name}: {error}", file=sys.stderr)
    for operation_id, error in sorted(result.operation_failures.items()):
        print(f"Operation {operation_id}: {error}", file=sys.stderr)


def main(args: list[str] | None = None) -> int:
    """Resolve an OpenAPI document and write its manifests."""
    options = build_parser().parse_args(args)
    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        spec = OASParser().parse_file(options.spec_file)
        result = Engine.from_spec(spec).run(spec.operations)
        generator = ManifestGenerator(ManifestTemplateEngine(options.template_dir))
        with staged_output_dir(options.output_dir) as staging:
            files = generator.generate_manifests(spec, result, staging, options.package_name)
            write_files_to_disk(files)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_NOT_FOUND
    except json.JSONDecodeError as e:
        print(f"Error: {options.spec_file} is not valid JSON: {e}", file=sys.stderr)
        return EXIT_INVALID_JSON
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if options.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR

    report_decisions(spec, result)
    for path in sorted(files):
        print(f"Wrote {options.output_dir / path.relative_to(staging)}")

    if not result.succeeded:
        report_failures(result)
        print(f"Failed: {len(result.failures)} schemas, {len(result.operation_failures)} operations", file=sys.stderr)
        return EXIT_RESOLUTION_FAILURES
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
