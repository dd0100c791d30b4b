"""Main entry point when executing statuscache as a package.

This allows running the package using python -m statuscache.
"""

from statuscache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
