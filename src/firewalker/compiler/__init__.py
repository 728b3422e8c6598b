"""
Compiler driver.
"""

from .driver import CompilerDriver, CompilationResult
