"""Routing — capabilities, verbs, and the combined first-match router.

Capabilities are registered in order and asked in that order; the
first one that answers a request wins.
"""
