"""CLI module for slimctx."""
