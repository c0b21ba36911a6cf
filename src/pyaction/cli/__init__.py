"""Command line interface of pyaction."""
