import argparse
import logging
import os
import sys

from npm_buttons.config import Config, HistoryConfig, load_settings
from npm_buttons.console_factory import ConsoleFactory
from npm_buttons.ui.logger import configure_logging

DEFAULT_STATE_FILE = os.path.join(".npm-buttons", "state.json")
DEFAULT_SETTINGS_FILE = os.path.join(".vscode", "settings.json")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="npm-buttons",
        description="Launch and stop package scripts from persistent buttons.",
    )
    parser.add_argument("workspace", nargs="?", default=os.getcwd(),
                        help="workspace root (default: current directory)")
    parser.add_argument("--state", default=None,
                        help=f"history state file (default: <workspace>/{DEFAULT_STATE_FILE})")
    parser.add_argument("--settings", default=None,
                        help=f"settings file (default: <workspace>/{DEFAULT_SETTINGS_FILE})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def build_config(args) -> Config:
    root = os.path.abspath(args.workspace)
    state_file = args.state or os.path.join(root, DEFAULT_STATE_FILE)
    settings_file = args.settings or os.path.join(root, DEFAULT_SETTINGS_FILE)
    return Config(
        workspace_root=root,
        view=load_settings(settings_file),
        history=HistoryConfig(state_file=state_file),
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(getattr(logging, args.log_level))
    ConsoleFactory(build_config(args)).start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
