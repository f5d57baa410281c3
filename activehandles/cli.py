#!/usr/bin/env python3
"""
activehandles CLI Interface

Runs a callable on a fresh event loop and reports what the loop is still
waiting on after a while.
"""

import argparse
import asyncio
import importlib
import inspect
import io
import json
import sys

from . import __version__
from .compat import install_compat_shim
from .config import ActiveHandlesConfig
from .core import active_handles
from .printer import print_handles


def create_parser():
    """Create the argument parser for the activehandles CLI."""
    parser = argparse.ArgumentParser(
        prog='activehandles',
        description='activehandles - show the timers and sockets keeping an event loop alive',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  activehandles run myapp.server:main --after 2
  activehandles run myapp.jobs:start --shim --format json --output handles.json
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Run a callable and snapshot its event loop')
    run_parser.add_argument('target',
                            help='Callable to run, as module:callable')
    run_parser.add_argument('--after', '-a', type=float, default=1.0,
                            help='Seconds to let the loop run before the snapshot (default: 1)')
    run_parser.add_argument('--format', choices=['text', 'json'], default='text',
                            help='Output format (default: text)')
    run_parser.add_argument('--output', '-o', type=str,
                            help='Output file for the report')
    run_parser.add_argument('--shim', action='store_true',
                            help='Install the call_later shim before running')
    run_parser.add_argument('--no-color', action='store_true',
                            help='Disable ANSI colours')
    run_parser.add_argument('--no-highlight', action='store_true',
                            help='Print callback source without highlighting')
    run_parser.add_argument('--no-line-numbers', action='store_true',
                            help='Omit line numbers from highlighted source')

    return parser


def load_target(target):
    """Import ``module:attr.path`` and return the callable it names."""
    module_name, sep, attr_path = target.partition(':')
    if not sep or not module_name or not attr_path:
        raise ValueError(f"target must look like 'module:callable', got '{target}'")

    obj = importlib.import_module(module_name)
    for part in attr_path.split('.'):
        obj = getattr(obj, part)
    if not callable(obj):
        raise TypeError(f"{target} is not callable")
    return obj


def _config_from_args(args):
    config = ActiveHandlesConfig.from_env()
    overrides = {}
    if args.no_color:
        overrides['color'] = False
    if args.no_highlight:
        overrides['highlight'] = False
    if args.no_line_numbers:
        overrides['line_numbers'] = False
    return config.merge(**overrides) if overrides else config


def _shutdown(loop):
    try:
        pending = [t for t in asyncio.all_tasks(loop) if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def snapshot(target, after, config):
    """Run ``target`` on a new loop for ``after`` seconds and resolve the loop's handles."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        if inspect.iscoroutinefunction(target):
            loop.create_task(target())
        else:
            loop.call_soon(target)
        loop.run_until_complete(asyncio.sleep(after))
        return active_handles(loop, config=config)
    finally:
        _shutdown(loop)


def cmd_run(args):
    """Handle run command."""
    try:
        config = _config_from_args(args)
        if args.shim:
            install_compat_shim(config)
        target = load_target(args.target)
    except Exception as e:
        print(f"Failed to load {args.target}: {e}")
        return 1

    try:
        handles = snapshot(target, max(0.0, args.after), config)
    except Exception as e:
        print(f"Failed to run {args.target}: {e}")
        return 1

    if args.format == 'json':
        output = json.dumps([h.to_dict() for h in handles], indent=2)
    else:
        buffer = io.StringIO()
        color = config.color
        if color is None:
            color = False if args.output else sys.stdout.isatty()
        print_handles(handles, file=buffer, color=color)
        output = buffer.getvalue().rstrip("\n") or "No active handles"

    if args.output:
        with open(args.output, 'w') as f:
            f.write(output)
        print(f"Report saved to {args.output}")
    else:
        print(output)

    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handlers
    handlers = {
        'run': cmd_run,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
