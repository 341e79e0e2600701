"""
Savings Party - Source Package

A savings tracker that turns each savings goal into a creature which
levels up and evolves as the goal fills.

DESIGN PRINCIPLES:
1. Progress is always recomputed from the entries, never stored
2. Progression math is total: any input gives a renderable answer
3. Expected failures are return values, not exceptions
4. Milestones are returned to the caller, not broadcast
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Savings Party Team"
