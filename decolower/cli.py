"""Command-line interface for decolower."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress
from rich.table import Table

from decolower import DecoLower
from decolower.core.config import config
from decolower.core.error_handling import DecoLowerError
from decolower.core.workspace import Workspace
from decolower.models.enums import EmitForm


def _unit_rows(hem: DecoLower, code: str) -> List[Dict[str, Any]]:
    rows = []
    for site in hem.classify(code):
        declaration = site.declaration
        name = getattr(declaration, 'binding_name', None) or declaration.kind.value
        for unit in site.units:
            descriptor = unit.initial_descriptor
            rows.append({
                'declaration': name,
                'line': unit.range.start_line if unit.range else None,
                'level': unit.level.value,
                'target': unit.target.expression,
                'key': str(unit.key) if unit.key else None,
                'snapshot': unit.key.snapshot if unit.key else None,
                'decorators': [d.text for d in unit.decorators],
                'descriptor': descriptor.kind.value if descriptor else None,
            })
    return rows


def _units(file_path: str, language: str | None, raw_json: bool, console: Console) -> None:
    """Print the decoration units of ``file_path``."""
    hem = DecoLower(language) if language else DecoLower.from_file_path(file_path)
    rows = _unit_rows(hem, DecoLower.load_file(file_path))
    if raw_json:
        print(json.dumps(rows, indent=2))
        return
    table = Table(title=f'Decoration units in {file_path}')
    for column in ('line', 'level', 'target', 'key', 'decorators (source order)', 'descriptor'):
        table.add_column(column)
    for row in rows:
        table.add_row(
            str(row['line']), row['level'], row['target'], row['key'] or '',
            ', '.join(f'@{d}' for d in row['decorators']), row['descriptor'] or '',
        )
    console.print(table)


def _desugar(file_path: str, language: str | None, emit_form: str | None, output: str | None,
             console: Console) -> None:
    """Lower ``file_path`` and print or write the result."""
    if language:
        hem = DecoLower(language, emit_form=emit_form)
    else:
        hem = DecoLower.from_file_path(file_path, emit_form=emit_form)
    result = hem.desugar_file(file_path, output)
    if output:
        console.print(Panel(f'Wrote {output}', style='green'))
    else:
        sys.stdout.write(result)


def _batch(directory: str, out_dir: str, extensions: List[str] | None, emit_form: str | None,
           console: Console) -> None:
    """Lower every supported file under ``directory`` into ``out_dir``."""
    exts: set[str] = set()
    for item in extensions or []:
        exts.update(p.strip() for p in item.split(',') if p.strip())
    workspace = Workspace.open(directory, exts)
    with Progress(console=console, transient=True) as progress:
        progress.add_task(f'Lowering {len(workspace.files())} files', total=None)
        report = workspace.desugar_all(out_dir, emit_form=emit_form)
    if report.ok:
        console.print(Panel(f'Lowered {len(report.written)} files into {out_dir}', style='green'))
        return
    console.print(Panel(report.errors.format(), title=f'{len(report.errors)} files failed', style='red'))
    sys.exit(1)


def main() -> None:
    """Entry point for the ``decolower`` command."""

    console = Console()
    parser = argparse.ArgumentParser(description='decolower command-line interface')
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--quiet', action='store_true', help='Reduce logs to errors only')
    parser.add_argument('--config', help='JSON configuration file')
    sub = parser.add_subparsers(dest='command')
    forms = [form.value for form in EmitForm]

    desugar_p = sub.add_parser('desugar', help='Lower decorators in a file')
    desugar_p.add_argument('file', help='Source file path')
    desugar_p.add_argument('--emit-form', choices=forms, help='Output form')
    desugar_p.add_argument('--language', choices=DecoLower.supported_languages(), help='Override language detection')
    desugar_p.add_argument('--output', help='Write the result here instead of stdout')

    units_p = sub.add_parser('units', help='Show the decoration units of a file')
    units_p.add_argument('file', help='Source file path')
    units_p.add_argument('--language', choices=DecoLower.supported_languages(), help='Override language detection')
    units_p.add_argument('--raw-json', action='store_true', help='Output raw JSON')

    batch_p = sub.add_parser('batch', help='Lower every supported file under a directory')
    batch_p.add_argument('directory', help='Source directory')
    batch_p.add_argument('--out-dir', required=True, help='Directory for the lowered files')
    batch_p.add_argument(
        '--ext',
        action='append',
        help='Limit to files with given extension(s); repeat or use comma-separated (e.g., --ext .js --ext .ts,.tsx)',
    )
    batch_p.add_argument('--emit-form', choices=forms, help='Output form')

    args = parser.parse_args()
    if args.config:
        try:
            config.load_file(args.config)
        except DecoLowerError as e:
            console.print(f'[bold red]{type(e).__name__}:[/bold red] {e}')
            sys.exit(1)
    if getattr(args, 'debug', False):
        log_level = logging.DEBUG
    elif getattr(args, 'quiet', False):
        log_level = logging.ERROR
    elif getattr(args, 'verbose', False):
        log_level = logging.INFO
    else:
        log_level = getattr(logging, str(config.get('logging', 'level', 'WARNING')).upper(), logging.WARNING)
    logging.basicConfig(level=log_level)

    try:
        if args.command == 'desugar':
            if not os.path.exists(args.file):
                console.print(f'[bold red]File not found:[/bold red] {args.file}')
                sys.exit(1)
            _desugar(args.file, args.language, args.emit_form, args.output, console)
        elif args.command == 'units':
            if not os.path.exists(args.file):
                console.print(f'[bold red]File not found:[/bold red] {args.file}')
                sys.exit(1)
            _units(args.file, args.language, args.raw_json, console)
        elif args.command == 'batch':
            if not os.path.isdir(args.directory):
                console.print(f'[bold red]Directory not found:[/bold red] {args.directory}')
                sys.exit(1)
            _batch(args.directory, args.out_dir, args.ext, args.emit_form, console)
        else:
            parser.print_help()
    except DecoLowerError as e:
        console.print(f'[bold red]{type(e).__name__}:[/bold red] {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
