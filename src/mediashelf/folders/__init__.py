"""Folder tree."""
