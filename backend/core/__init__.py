"""
4B Swing Scoring Engine

Turns motion-capture kinetic-energy exports into Brain / Body / Bat / Ball
scores, a leak classification, a motor profile and drill prescriptions.
"""

__version__ = "1.0.0"
