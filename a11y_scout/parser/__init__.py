# a11y_scout/parser/__init__.py
"""Document parsers used during discovery."""
