"""Entry point for 'python -m groupaccess' command."""

from groupaccess.cli import main

if __name__ == "__main__":
    main()
