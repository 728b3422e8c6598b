"""
Binding and bound-tree passes.
"""

from .base import BasePass, CompilationContext, PassManager
from .binder import PropertyBinder
from .const_folding import ConstantFoldingPass
from .dependencies import DependencyAnalysisPass, collect_dependencies
from .ir_validation import IRValidationPass
