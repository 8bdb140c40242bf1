"""Syntax tree nodes and runtime support (heap, strings, containers, tasks, JSON, math, I/O, networking) for the Chris language."""

__version__ = "0.1.0"