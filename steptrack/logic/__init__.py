"""Core business logic layer.

Subpackages:
- groups: create / delete / merge transactions over the membership registry
- ranking: daily achievers, group leaderboard, rewards and goal suggestions
- reporting: structured views built from rankings (group range report)
"""
__all__ = ["groups", "ranking", "reporting"]
