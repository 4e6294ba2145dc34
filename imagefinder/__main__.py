"""
Allow running the package with: python -m imagefinder

By default, runs the command-line interface. Use the 'serve' subcommand for
the local API and 'config' to inspect user configuration.

Examples:
    python -m imagefinder index ~/Pictures   # Index a folder
    python -m imagefinder search query.jpg   # Search by example
    python -m imagefinder serve              # Launch the local API
    python -m imagefinder config --init      # Create example config file
"""

import sys


def show_config(argv) -> int:
    from .user_config import get_user_config

    config = get_user_config()

    if '--init' in argv or '-i' in argv:
        # Create example config file
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize Image Finder settings.")
            return 0
        print("Failed to create configuration file.")
        return 1

    # Show current config path and values
    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m imagefinder config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  index_db_file: {config.index_db_file}")
    print(f"  default_workers: {config.default_workers}")
    print(f"  batch_size: {config.batch_size}")
    print(f"  result_limit: {config.result_limit}")
    print(f"  forced_match_distance: {config.forced_match_distance}")
    print(f"  max_image_pixels: {config.max_image_pixels:,}")
    return 0


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] == 'serve':
        from .app import main as serve_main
        serve_main(argv[1:])
        return 0
    if argv and argv[0] == 'config':
        return show_config(argv[1:])

    from .cli import main as cli_main
    return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
