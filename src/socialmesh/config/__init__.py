"""Typed configuration property classes."""
