"""Agents that play the Wood Block environment."""
