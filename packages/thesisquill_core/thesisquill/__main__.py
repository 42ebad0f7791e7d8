"""
Entry point for running ThesisQuill as a module.

Usage:
    python -m thesisquill export thesis.json --output thesis.docx
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
