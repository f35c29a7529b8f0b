"""
AssetLocker Client - Main Entry Point

This is the main entry point for the AssetLocker command-line client.

Author: AssetLocker Project
"""

import sys
import argparse

from .cli import run_cli_command


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='assetlocker',
        description='AssetLocker - exclusive editing locks for shared binary assets',
        epilog='Asset paths are relative to the project root (e.g. Assets/Prefabs/Hero.prefab)'
    )
    parser.add_argument('--config-dir',
                        help='Directory containing assetlocker.json (default: current directory)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    for name, help_text in (
        ('lock', 'Lock one or more assets'),
        ('unlock', 'Unlock one or more assets'),
        ('status', 'Show who holds one or more assets'),
    ):
        command_parser = subparsers.add_parser(name, help=help_text)
        command_parser.add_argument('paths', nargs='+', metavar='PATH')

    save_parser = subparsers.add_parser('save', help='Check a save batch; locks free assets and blocks the rest')
    save_parser.add_argument('paths', nargs='+', metavar='PATH')

    subparsers.add_parser('list', help='List every lock on the current origin/branch')
    subparsers.add_parser('auto-unlock', help='Release own locks whose changes are committed and pushed')
    subparsers.add_parser('watch', help='Keep lock status fresh and auto-unlock until Ctrl+C')
    subparsers.add_parser('ping', help='Check that the lock service is reachable')

    set_user_parser = subparsers.add_parser('set-user', help='Set the user name sent with lock requests')
    set_user_parser.add_argument('name')

    subparsers.add_parser('whoami', help='Show the configured user name')

    return parser


def main(argv=None):
    """
    Main entry point for AssetLocker client.

    Parses command-line arguments and runs the requested command.
    """
    args = build_parser().parse_args(argv)

    return run_cli_command(
        args.command,
        paths=getattr(args, 'paths', None),
        user_name=getattr(args, 'name', None),
        config_dir=args.config_dir
    )


if __name__ == '__main__':
    sys.exit(main())
