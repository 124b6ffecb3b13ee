"""Shared utilities: constants, errors, logging and protocols."""
