# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
gh-checkproxy command line interface.

Usage:
    gh-checkproxy pr checks 42 --watch
    gh-checkproxy config set --proxy-url https://checks.example.com
    gh-checkproxy status
"""

from .main import cli, main

__all__ = ['cli', 'main']
