"""Utilities shared by the projects."""
