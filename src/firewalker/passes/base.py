"""
Base Pass System

Passes run over a bound tree after binding. Each pass receives the tree and
the compilation context and returns the (possibly rewritten) tree; analysis
results are stored on the context rather than on the pass.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set, Type

from ..ir.graph import Graph
from ..ir.nodes import BoundNode
from ..shared.errors import ErrorReporter

logger = logging.getLogger(__name__)


class CompilationContext:
    """
    State shared by the passes of one compilation: the symbol environment,
    the error reporter and per-pass analysis results.
    """

    def __init__(self, graph: Optional[Graph] = None,
                 source_files: Optional[Dict[str, str]] = None):
        self.graph = graph if graph is not None else Graph()
        self.reporter = ErrorReporter(source_files)
        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get analysis results from a pass"""
        if pass_class not in self._analysis_results:
            raise RuntimeError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        self._analysis_results[pass_class] = results


class BasePass(ABC):
    """
    Base class for bound-tree passes.

    `requires` lists passes that must run first. run() may return None when
    the pass deletes the whole tree.
    """
    requires: List[Type['BasePass']] = []

    @abstractmethod
    def run(self, node: BoundNode, ctx: CompilationContext) -> Optional[BoundNode]:
        raise NotImplementedError


class PassManager:
    """Runs registered passes in dependency order."""

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], Set[Type[BasePass]]] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, node: BoundNode, ctx: CompilationContext,
                dump_ir: bool = False) -> Optional[BoundNode]:
        """
        Run all passes in dependency order. Stops early if a pass deletes the
        tree. With dump_ir, logs the tree after each pass.
        """
        for pass_class in self._topological_sort():
            if node is None:
                break
            node = pass_class().run(node, ctx)
            if dump_ir:
                from ..ir.serialization import BoundTreeSerializer
                dump = BoundTreeSerializer(include_types=True).serialize(node) if node else "<deleted>"
                logger.debug(f"after {pass_class.__name__}: {dump}")
        return node

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies, stable in registration order"""
        in_degree = {
            p: len(self._dependency_graph[p] & set(self.passes)) for p in self.passes
        }
        queue = [p for p in self.passes if in_degree[p] == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)
            for other in self.passes:
                if pass_class in self._dependency_graph[other]:
                    in_degree[other] -= 1
                    if in_degree[other] == 0:
                        queue.append(other)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular dependency detected in passes")
        return result
