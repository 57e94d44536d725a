try:
    from cli.app import cli
except ModuleNotFoundError:
    # running main.py directly from a checkout: put the project root on sys.path
    import os
    import sys

    sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
    from cli.app import cli


def main(argv=None):
    """quake-inventory console script (delegates to cli.app:cli)"""
    cli(args=argv, prog_name="quake-inventory")


if __name__ == "__main__":
    main()
