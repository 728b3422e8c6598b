"""
Source Location

Positions of HIL expressions inside configuration files. The external parser
attaches one of these to every AST node; bound nodes reach it through their
originating AST node.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceLocation:
    """
    Source location of an interpolation expression.

    Immutable (frozen) so it can be shared between AST and bound nodes and
    used as a dictionary key.
    """
    file: str
    line: int
    column: int
    end_line: int = 0
    end_column: int = 0

    def __str__(self) -> str:
        """Format as file:line:column"""
        return f"{self.file}:{self.line}:{self.column}"
