#!/usr/bin/env python3
"""Upload the current solution to the Hash Code judge.

Usage examples (the package must be installed first, e.g. `pip install -e .`):
  python scripts/upload_solution.py
  python scripts/upload_solution.py --dry-run
  HASH_CODE_DEBUG=1 python scripts/upload_solution.py --builds-dir .builds

Same as the installed `hashcode-upload` command and `python -m hashcode_upload.cli`.
"""
from hashcode_upload.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
