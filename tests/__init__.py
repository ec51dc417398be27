"""
Only the root tests directory carries an __init__.py.

It makes `tests` importable as a package, so test modules can share builders
through `from tests.helpers... import ...`. Subdirectories work as namespace
packages (PEP 420) and need no __init__.py of their own.
"""
