"""Command-line interface for vim-flavor."""
