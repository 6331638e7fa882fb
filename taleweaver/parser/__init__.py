"""Parsers for generated encounter and conclusion text."""
