"""rsx parser.

Parses JSX-like markup embedded in a host-language token stream into a tree
of nodes for code-generation tooling. Embedded expressions are captured
opaquely and never interpreted.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_tokens()
- Level 2: Configured parser - RsxParser class with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "rsx parser team"

# Progressive API disclosure - Level 1 and Level 2
from .api import RsxParser, parse, parse_tokens

# Configuration and errors
from .shared import ConfigError, ConfigValidationError, ParserConfig, RsxSyntaxError

# Tokens for callers that tokenize themselves
from .tokenization import RsxTokenizer, Token, TokenStream, tokenize

# Core result objects
from .tree import ExprKind, Node, NodeName, NodeNameKind, NodeType, OpaqueExpr

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_tokens",

    # Level 2: Configured parser
    "RsxParser",
    "ParserConfig",

    # Errors
    "ConfigError",
    "ConfigValidationError",
    "RsxSyntaxError",

    # Tokens
    "RsxTokenizer",
    "Token",
    "TokenStream",
    "tokenize",

    # Result objects and data structures
    "ExprKind",
    "Node",
    "NodeName",
    "NodeNameKind",
    "NodeType",
    "OpaqueExpr",
]
