"""
Core enumerations for the componentsplit data models.
"""
from enum import Enum

class DeclarationForm(str, Enum):
    """How an extracted component was declared in the host unit"""
    NAMED_DECLARATION = 'named_declaration'
    BOUND_EXPRESSION = 'bound_expression'
