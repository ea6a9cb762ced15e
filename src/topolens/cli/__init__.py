"""Command line interface for topolens."""
