"""Shared CLI building blocks: context, options, error handling."""
