"""
Gammon - Backgammon Automa Engine

A deterministic, rules-driven Backgammon engine with a searching AI opponent.
The engine provides:
- State management with perspective-relative utility
- Legal action generation with move ordering
- Time-bounded expectimax search
- A service facade for GUIs and a command line
"""

__version__ = "0.1.0"
