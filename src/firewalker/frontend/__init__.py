"""
Frontend: interpretation of interpolated variable reference text.
"""

from .variables import (
    parse_variable, InterpolatedVariable, CountValueType, ResourceMode,
    CountVariable, PathVariable, SelfVariable, SimpleVariable, TerraformVariable,
    UserVariable, LocalVariable, ModuleVariable, ResourceVariable,
)
