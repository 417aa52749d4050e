"""
TypeReflect Command-Line Interface

This module provides the CLI entry point for TypeReflect. It orchestrates
the full pipeline: resolve type -> walk members -> render -> output.

Usage:
    typereflect collections:OrderedDict
    typereflect mypkg.models:User --language vb
    typereflect mypkg.models:User --instantiate --output User.cs
    typereflect --list-languages

Design Principles:
    1. Sensible defaults: C# syntax, all members, values probed when possible
    2. Transparency: Shows what's happening with --verbose
    3. Safety: --no-invoke avoids calling methods on the inspected type
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from typereflect import __version__
from typereflect.profiles import create_profile_registry
from typereflect.renderer import RenderOptions, render_tree
from typereflect.walker import TypeWalker, resolve_type


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="typereflect",
        description=(
            "TypeReflect: render a Python class as pseudo-source.\n\n"
            "Describes a class (base type, interfaces, constructor, fields, "
            "properties and methods) in the syntax of a chosen language."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  typereflect collections:OrderedDict        # C# syntax\n"
            "  typereflect enum:Enum --language vb        # Visual Basic syntax\n"
            "  typereflect mypkg:Config --instantiate     # Show current values\n"
            "  typereflect mypkg:Config --no-invoke       # Never call methods\n"
            "\n"
            "Note: the output is documentation, not compilable source.\n"
        ),
    )

    # Positional argument: type specification
    parser.add_argument(
        "type",
        type=str,
        nargs="?",
        default=None,
        help="Class to render, as module:QualName (or module.Name)",
    )

    # Syntax options
    parser.add_argument(
        "-l", "--language",
        type=str,
        default="csharp",
        help="Target syntax (default: csharp)",
    )

    parser.add_argument(
        "--list-languages",
        action="store_true",
        help="List available target syntaxes and exit",
    )

    # Probing options
    parser.add_argument(
        "--instantiate",
        action="store_true",
        help="Construct the class with no arguments and probe that instance",
    )

    parser.add_argument(
        "--no-values",
        action="store_true",
        help="Do not read field and property values",
    )

    parser.add_argument(
        "--no-invoke",
        action="store_true",
        help="Do not call zero-argument methods",
    )

    parser.add_argument(
        "--no-pseudo-attributes",
        action="store_true",
        help="Omit Serializable/InternalCall pseudo-annotations",
    )

    parser.add_argument(
        "--public-only",
        action="store_true",
        help="Skip private and protected members",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file path (default: stdout)",
    )

    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing output file",
    )

    # Verbosity
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show detailed progress information",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def log(message: str, quiet: bool = False) -> None:
    """
    Print a message to stderr (for progress/status).

    Args:
        message: The message to print
        quiet: If True, suppress the message
    """
    if quiet:
        return
    print(f"[typereflect] {message}", file=sys.stderr)


def log_verbose(message: str, verbose: bool, quiet: bool) -> None:
    """Print a message only in verbose mode."""
    if verbose and not quiet:
        print(f"  {message}", file=sys.stderr)


def run_render(
    type_spec: str,
    language: str,
    output_path: Optional[Path],
    options: RenderOptions,
    instantiate: bool = False,
    public_only: bool = False,
    force: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> int:
    """
    Run the full TypeReflect pipeline.

    Args:
        type_spec: Class specification (module:QualName)
        language: Profile name or alias
        output_path: Where to write the result (None = stdout)
        options: Rendering options
        instantiate: Construct the class to obtain a live instance
        public_only: Skip private and protected members
        force: Overwrite an existing output file
        verbose: If True, show detailed progress
        quiet: If True, suppress non-error output

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    # Step 1: Resolve profile and type
    try:
        profile = create_profile_registry().get(language)
        cls = resolve_type(type_spec)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output_path is not None and output_path.exists() and not force:
        print(f"Error: File already exists: {output_path}", file=sys.stderr)
        print("Use --force to overwrite.", file=sys.stderr)
        return 1

    log_verbose(f"Type: {cls!r}", verbose, quiet)
    log_verbose(f"Language: {profile.name}", verbose, quiet)

    # Step 2: Optional live instance
    instance: Any = None
    if instantiate:
        try:
            instance = cls()
            log_verbose("Instance created; values will be probed", verbose, quiet)
        except Exception as e:
            log(f"Warning: could not instantiate {cls.__name__}: {e}", quiet=quiet)

    # Step 3: Walk members
    tree = TypeWalker(include_private=not public_only).walk(cls)
    log_verbose(f"Members: {len(tree.members)}", verbose, quiet)

    # Step 4: Render
    try:
        blocks = render_tree(tree, profile, instance, options)
    except Exception as e:
        print(f"Error during rendering: {e}", file=sys.stderr)
        return 1

    content = "\n".join(blocks) + "\n"

    # Step 5: Output
    if output_path is None:
        sys.stdout.write(content)
        return 0

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        print(f"Error writing file: {e}", file=sys.stderr)
        return 1

    log(f"Written to: {output_path}", quiet=quiet)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose and not args.quiet:
        logging.basicConfig(level=logging.DEBUG, format="  %(name)s: %(message)s")

    if args.list_languages:
        for profile in create_profile_registry().get_profiles():
            aliases = f" ({', '.join(profile.aliases)})" if profile.aliases else ""
            print(f"{profile.name}{aliases}")
        return 0

    if not args.type:
        parser.print_usage(sys.stderr)
        print("Error: a type to render is required", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else None

    render_options = RenderOptions(
        probe_values=not args.no_values,
        invoke_methods=not args.no_invoke,
        include_pseudo_attributes=not args.no_pseudo_attributes,
    )

    return run_render(
        type_spec=args.type,
        language=args.language,
        output_path=output_path,
        options=render_options,
        instantiate=args.instantiate,
        public_only=args.public_only,
        force=args.force,
        verbose=args.verbose,
        quiet=args.quiet,
    )


if __name__ == "__main__":
    sys.exit(main())
