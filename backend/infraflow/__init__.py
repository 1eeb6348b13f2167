"""
InfraFlow core

Natural-language to infrastructure-graph parsing, operation-based graph
mutation and change-risk assessment.
"""

__version__ = "0.5.0"
