"""Framework-agnostic web ports."""
