"""Domain layer: IDS parsing, stroke orders, rules, and evaluation.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
