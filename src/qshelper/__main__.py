"""CLI entry point: python -m qshelper <command> [options]"""
from qshelper.cli import main

if __name__ == "__main__":
    main()
