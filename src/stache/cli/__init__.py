"""Stache command line interface."""
