"""
Tree-sitter engine: grammars and AST helpers.
"""
