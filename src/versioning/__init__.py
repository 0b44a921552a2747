"""Requirement parsing and registry version resolution."""
