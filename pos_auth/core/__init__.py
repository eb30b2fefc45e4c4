"""Core: configuration, errors, logging, security and store interfaces."""
