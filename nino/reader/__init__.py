from nino.reader.lexer import Token, TokenKind, lex, tokenize
from nino.reader.parser import Parser, TokenStream, parse, parse_declaration, parse_expression
