# Simian: a small interpreted language
"""
Simian: lexer, Pratt parser and tree-walking evaluator for a small
dynamically-typed language with closures, arrays and hashes.
"""
import logging

from .lexer import Lexer, Token, TokenType
from .parser import Parser, ParseError, ASTNode, Program, parse
from .objects import (
    Object, ObjectType, Integer, Boolean, String, Null, Array, Hash,
    Function, Builtin, ReturnValue, Error, NULL, TRUE, FALSE,
)
from .environment import Environment
from .builtins import BUILTINS
from .interpreter import Interpreter, evaluate
from .errors import SimianError

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "Lexer", "Token", "TokenType",
    "Parser", "ParseError", "ASTNode", "Program", "parse",
    "Object", "ObjectType", "Integer", "Boolean", "String", "Null",
    "Array", "Hash", "Function", "Builtin", "ReturnValue", "Error",
    "NULL", "TRUE", "FALSE",
    "Environment", "BUILTINS",
    "Interpreter", "evaluate",
    "SimianError",
]
