"""
Envelope Template CLI

Builds composite template entries or renders single documents from the
command line.

Examples:
    python -m envelope_templates build templates listing-agreement
    python -m envelope_templates build templates listing-agreement --multipart --parts-dir out/
    python -m envelope_templates render templates listing-agreement 1 out/iabs.pdf
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Config
from .exceptions import TemplateError
from .template import Template

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='envelope-templates',
        description='Build e-signature composite template entries from YAML templates'
    )
    parser.add_argument('--log-level', default=Config.LOG_LEVEL,
                        help='Logging level (default: %(default)s)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    build = subparsers.add_parser('build', help='Print a composite template entry as JSON')
    build.add_argument('base_directory', nargs='?', default=Config.TEMPLATES_DIR)
    build.add_argument('template_name')
    build.add_argument('--sequence', type=int, default=1)
    build.add_argument('--roles', nargs='+',
                       help='Only include recipients with these roles (default: all)')
    build.add_argument('--multipart', action='store_true',
                       help='Leave PDFs out of the entry')
    build.add_argument('--parts-dir', type=Path,
                       help='Write multipart PDF parts to this directory')

    render = subparsers.add_parser('render', help='Write one document PDF with all fields applied')
    render.add_argument('base_directory')
    render.add_argument('template_name')
    render.add_argument('document_id', help='document_id as declared in the template')
    render.add_argument('output', type=Path)

    return parser


def _selected_recipients(template: Template, roles):
    """Recipients by type, optionally restricted to some roles."""
    if not roles:
        return template.recipients

    result = {}
    for type_name, type_recipients in template.recipients.items():
        matching = [r for r in type_recipients if r.role_name in roles]
        if matching:
            result[type_name] = matching
    return result


def run_build(args) -> int:
    template = Template(args.base_directory, args.template_name)
    recipients = _selected_recipients(template, args.roles)

    if not args.multipart:
        entry = template.serialize_composite_entry(recipients, args.sequence)
        print(json.dumps(entry, indent=2, default=str))
        return 0

    entry, parts = template.serialize_composite_entry(recipients, args.sequence, multipart=True)
    print(json.dumps(entry, indent=2, default=str))

    if args.parts_dir:
        args.parts_dir.mkdir(parents=True, exist_ok=True)
        for part in parts:
            filename = part['filename'] or 'document.pdf'
            path = args.parts_dir / f"{part['id']}-{filename}"
            path.write_bytes(part['data'])
            logger.info(f"Wrote {path}")

    return 0


def run_render(args) -> int:
    template = Template(args.base_directory, args.template_name)
    document = template.document_for_original_id(args.document_id)

    if document is None:
        logger.error(f"No document with id {args.document_id} in {args.template_name}")
        return 1

    all_recipients = [r for type_recipients in template.recipients.values() for r in type_recipients]
    document.save_pdf(str(args.output), all_recipients)
    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )

    commands = {
        'build': run_build,
        'render': run_render,
    }

    try:
        return commands[args.command](args)
    except TemplateError as e:
        logger.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
