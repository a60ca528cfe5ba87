"""Command-line surface: argument routing and output rendering."""
