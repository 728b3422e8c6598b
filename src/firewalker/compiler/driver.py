"""
Compiler Driver

Binds a configuration property and runs the bound-tree passes over it.
Source errors are reported to the context's ErrorReporter instead of being
raised; internal errors propagate.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from ..ir.graph import Graph
from ..ir.nodes import BoundNode
from ..passes.base import BasePass, CompilationContext, PassManager
from ..passes.binder import PropertyBinder
from ..passes.const_folding import ConstantFoldingPass
from ..passes.dependencies import DependencyAnalysisPass
from ..passes.ir_validation import IRValidationPass
from ..shared.errors import FirewalkerSourceError

logger = logging.getLogger(__name__)


class CompilationResult:
    """Compilation result"""
    def __init__(
        self,
        node: Optional[BoundNode] = None,
        ctx: Optional[CompilationContext] = None,
        success: bool = False
    ):
        self.node = node
        self.ctx = ctx
        self.success = success

    def has_errors(self) -> bool:
        if self.ctx is not None:
            return self.ctx.reporter.has_errors()
        return not self.success

    def get_errors(self) -> List[str]:
        if self.ctx is not None and self.ctx.reporter.has_errors():
            return [self.ctx.reporter.format_all_errors(color=False)]
        return []


class CompilerDriver:
    """
    Orchestrates binding and the passes that follow it.

    Pass order:
    1. ConstantFoldingPass
    2. IRValidationPass
    3. DependencyAnalysisPass
    """

    def __init__(self, passes: Optional[List[Type[BasePass]]] = None):
        self.pass_manager = PassManager()
        for pass_class in passes if passes is not None else self._default_passes():
            self.pass_manager.register_pass(pass_class)

    @staticmethod
    def _default_passes() -> List[Type[BasePass]]:
        return [ConstantFoldingPass, IRValidationPass, DependencyAnalysisPass]

    def bind_property(
        self,
        value: Any,
        graph: Graph,
        has_count_index: bool = False,
        source_files: Optional[Dict[str, str]] = None,
        dump_ir: bool = False,
    ) -> CompilationResult:
        ctx = CompilationContext(graph, source_files)
        binder = PropertyBinder(graph, has_count_index=has_count_index)

        try:
            node = binder.bind_property(value)
        except FirewalkerSourceError as e:
            logger.debug(f"binding failed: {e}")
            ctx.reporter.report_exception(e)
            return CompilationResult(None, ctx, success=False)

        node = self.pass_manager.run_all(node, ctx, dump_ir=dump_ir)
        return CompilationResult(node, ctx, success=not ctx.reporter.has_errors())
