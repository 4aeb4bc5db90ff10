"""
File Sorting Watchers

- debounce.py - single-slot timer that coalesces change bursts into runs
- filesystem.py - watchdog observer feeding the debounce timer
"""
