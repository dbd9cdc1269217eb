"""
Liftcoach - biomechanical analytics for recorded strength-training sessions.
"""

__version__ = "1.0.0"
