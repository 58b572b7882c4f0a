"""Resolution and deployment engine for vim-flavor."""
