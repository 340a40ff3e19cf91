from nino.types.ast import (
    Array,
    BinaryOperation,
    BinaryOperator,
    Bool,
    BOOLEAN,
    Char,
    CHAR,
    Declaration,
    Expression,
    FUNCTION,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    Item,
    Match,
    Number,
    NUMBER,
    Parameter,
    Type,
    TypeKind,
    array_of,
    is_value,
    string_literal,
)
from nino.types.environment import Environment
from nino.types.tail_call import TailCall
