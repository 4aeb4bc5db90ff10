"""
File Sorting Domain

Keeps the top level of one watched directory tidy:
- taxonomy.py - extension based category lookup
- snapshot.py - non-recursive scan split into files and folders
- provisioner.py - idempotent category folder creation
- relocator.py - single entry move with conflict/busy/missing-folder handling
- retry.py - bounded exponential backoff
- engine.py - full scan-and-relocate passes
- watchers/ - debounced run loop and watchdog bridge
"""

__all__ = ["engine", "errors", "provisioner", "relocator", "retry", "snapshot", "taxonomy", "watchers"]
