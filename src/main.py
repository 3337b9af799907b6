"""Main entry point for the terminal todo list.

Loads the tasks file, then either runs one command from argv or starts
the interactive prompt (see cli.main).
"""
from cli import main

if __name__ == "__main__":
    main()
