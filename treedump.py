#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
treedump - Dump a directory tree and file contents as context for Large Language Models

This script writes a tree of the directory followed by the contents of its text
files to stdout, ready to be redirected to a file or piped to a model.
"""

from treedump_lib.treedump_cli import main

if __name__ == "__main__":
    main()
