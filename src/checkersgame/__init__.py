"""Checkers game engine with a greedy AI and turn timers."""

__version__ = "0.1.0"
