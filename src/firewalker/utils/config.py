"""
Configuration constants used throughout firewalker
"""

from pathlib import Path

# Prefix of data source references and ids (Terraform 0.11 syntax)
DATA_RESOURCE_PREFIX = "data"

REFERENCE_SEPARATOR = "."
SPLAT_MARKER = "*"
COUNT_INDEX_FIELD = "index"
NO_INDEX = -1  # ResourceVariable.index for splats and plain references

# Provider names are the resource type prefix before the first separator
# (aws_instance -> aws) unless the resource names a provider alias.
PROVIDER_NAME_SEPARATOR = "_"

# Lark grammar for interpolated variable references
VARIABLE_GRAMMAR_FILE = Path(__file__).resolve().parent.parent / "frontend" / "variables.lark"

# Output folding
BOOLEAN_TRUE_LITERAL = "true"
BOOLEAN_FALSE_LITERAL = "false"
