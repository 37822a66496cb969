"""
BigPdfMerge - Python package for composing PDF documents page by page

Import several PDF files, select and rearrange their pages, and export the
chosen pages as a single document.
"""

import sys

__version__ = "1.0.0"
__author__ = "BigLinux Team"
__license__ = "GPL-3.0"


def main() -> int:
    """Main entry point for the application.

    Returns:
        The application exit code.
    """
    from bigpdfmerge.cli import main as cli_main

    return cli_main()


__all__ = ["main", "__version__", "__author__", "__license__"]


if __name__ == "__main__":
    sys.exit(main())
