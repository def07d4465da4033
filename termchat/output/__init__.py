"""Artifact output for termchat runs."""
