"""
EnderScript Command Line

    enderscript init     create esconfig.json (and the folder layout)
    enderscript build    compile .es files into a datapack
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .api import Context, Build, ProjectConfig
from .api.project import CONFIG_FILE
from .compiler import EnderScriptError


INTRO = (
    "This utility will walk you through creating an EnderScript project.\n"
    "It only covers the most common items, and tries to guess sensible defaults.\n"
    "\n"
    "Press ^C at any time to quit.\n"
)


def ask(prompt: str, default: str) -> str:
    answer = input(f"{prompt} ({default}): ").strip()
    return answer or default


def confirm(prompt: str, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    answer = input(f"{prompt} [{hint}]: ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def cmd_init(args: argparse.Namespace) -> int:
    root = Path.cwd()
    default_name = root.name or "enderscript"
    structure = not args.no_structure
    
    if args.yes:
        name = args.name or default_name
        namespace = args.namespace or name
        source = args.source or "./src"
        output = args.output or "./out"
    else:
        print(INTRO)
        name = args.name or ask("Name", default_name)
        namespace = args.namespace or ask("Namespace", name)
        source = args.source or ask("Source folder", "./src")
        output = args.output or ask("Output folder", "./out")
        if not args.no_structure:
            structure = confirm("Generate corresponding file structure?")
        print()
        if not confirm("Proceed with the setup?"):
            print("Setup wizard aborted.")
            return 1
    
    config = ProjectConfig(name, namespace, source, output)
    path = config.save(root)
    if structure:
        config.scaffold(root)
    
    print(f"Wrote {path}")
    return 0


def load_config(root: Path) -> Optional[ProjectConfig]:
    if not (root / CONFIG_FILE).exists():
        return None
    return ProjectConfig.load(root)


def cmd_build(args: argparse.Namespace) -> int:
    root = Path.cwd()
    try:
        config = load_config(root)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    
    if args.files:
        files = [Path(f) for f in args.files]
    elif config is not None:
        files = config.sources(root)
    else:
        print(f"error: no input files and no {CONFIG_FILE} in {root}", file=sys.stderr)
        return 1
    
    if not files:
        print("error: no .es files to build", file=sys.stderr)
        return 1
    
    namespace = args.namespace or (config.namespace if config else None) or "enderscript"
    output = Path(args.output) if args.output else (
        config.output_dir(root) if config else root / "out")
    
    ctx = Context(namespace=namespace, debug=args.debug)
    builds: List[Build] = []
    for path in files:
        try:
            build = ctx.compile_file(path, main_name=path.stem)
        except OSError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        except EnderScriptError as e:
            print(e.render(), file=sys.stderr)
            return 1
        builds.append(build)
    
    owners: Dict[str, Path] = {}
    for path, build in zip(files, builds):
        for block in build.program:
            if block.name in owners:
                print(f"error: function '{block.name}' is defined by both "
                      f"{owners[block.name]} and {path}", file=sys.stderr)
                return 1
            owners[block.name] = path
    
    for build in builds:
        if args.ast:
            print(build.ast())
        if args.print:
            print(build.disassemble())
            continue
        written = build.write(output)
        if args.debug:
            for target in written:
                print(f"  {target}")
    
    if not args.print:
        print(f"Built {len(builds)} file(s) into {output}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="enderscript", description="EnderScript compiler")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = ap.add_subparsers(dest="cmd", required=True)
    
    p_init = sub.add_parser("init", help="Create an esconfig.json in the current directory")
    p_init.add_argument("--yes", "-y", action="store_true", help="Accept defaults without prompting")
    p_init.add_argument("--name", default=None)
    p_init.add_argument("--namespace", default=None)
    p_init.add_argument("--source", default=None, help="Source folder")
    p_init.add_argument("--output", default=None, help="Output folder")
    p_init.add_argument("--no-structure", action="store_true", help="Only write the config file")
    p_init.set_defaults(func=cmd_init)
    
    p_build = sub.add_parser("build", help="Compile .es files into a datapack")
    p_build.add_argument("files", nargs="*", help="Input .es files (default: the project's source folder)")
    p_build.add_argument("--namespace", default=None)
    p_build.add_argument("--output", default=None, help="Datapack output folder")
    p_build.add_argument("--ast", action="store_true", help="Print the parsed AST")
    p_build.add_argument("--print", action="store_true", help="Print the blocks instead of writing them")
    p_build.add_argument("--debug", action="store_true", help="Print compiler progress")
    p_build.set_defaults(func=cmd_build)
    
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
