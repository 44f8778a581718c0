"""
Entry point for `python -m aadhaar_identity`.

Usage:
    python -m aadhaar_identity extract signed.pdf
    python -m aadhaar_identity analyze signed.pdf
    python -m aadhaar_identity batch ./documents
"""

from .ui.cli import main

main()
