"""
EnderScript Parser

Recursive descent parser that produces an AST from tokens.

Two lookahead disciplines are used: expect() is a hard requirement that
raises the supplied diagnostic, suspect() is a soft probe used to choose
between grammar alternatives. Both report an ERROR token as an illegal
character regardless of what was asked for.
"""

from typing import List, Optional, Tuple
from .tokens import Token, TokenType, get_precedence
from .ast import *
from .errors import ParseError, MessageType
from . import errors


BINARY_NODES = {
    TokenType.PLUS: Addition,
    TokenType.MINUS: Subtraction,
    TokenType.STAR: Multiplication,
    TokenType.SLASH: Division,
}

MATH_PRECEDENCE = get_precedence(TokenType.PLUS)


class Parser:
    """Recursive descent parser for EnderScript."""
    
    def __init__(self, tokens: List[Token]):
        """
        Initialize the parser.
        
        Args:
            tokens: List of tokens from the lexer, terminated by EOF
        """
        self.tokens = tokens
        self.current = 0
    
    def parse(self) -> List[Expression]:
        """
        Parse the token stream into the top-level statement list.
        
        Returns:
            Statements of the implicit main function
        """
        statements = []
        self.skip_newlines()
        
        while not self.is_at_end():
            statements.append(self.statement())
            
            if self.is_at_end():
                break
            if self.skip_newlines() == 0:
                raise self.error(
                    MessageType.MISSING_BLOCK_SEPARATOR_OR_CLOSURE,
                    errors.missing_statement_separator(),
                )
        
        return statements
    
    # =========================================================================
    # Statements
    # =========================================================================
    
    def statement(self) -> Expression:
        """Parse a statement."""
        if self.suspect(TokenType.LET):
            return self.variable_declaration()
        if self.suspect(TokenType.FUNCTION):
            return self.function_declaration()
        if self.suspect(TokenType.RAW):
            return self.raw_code()
        return self.math()
    
    def variable_declaration(self) -> VariableDeclaration:
        """Parse let name[: type][= initializer]."""
        start = self.advance().span
        
        name = self.expect_and_advance(
            TokenType.IDENTIFIER,
            MessageType.MISSING_MEMBER_NAME,
            errors.missing_member_name("variable"),
        )
        
        declared_type = None
        initializer = None
        has_type = self.suspect_and_advance(TokenType.COLON)
        if has_type:
            declared_type = self.expect_and_advance(
                TokenType.IDENTIFIER,
                MessageType.MISSING_MEMBER_TYPE,
                errors.missing_member_type("variable"),
            ).lexeme
        
        if self.suspect_and_advance(TokenType.ASSIGN):
            initializer = self.statement()
        elif not has_type:
            raise self.error(
                MessageType.MISSING_MEMBER_TYPE_OR_VALUE_ASSIGNMENT,
                errors.missing_member_type_or_value_assignment("variable"),
            )
        
        return VariableDeclaration(name.lexeme, declared_type, initializer,
                                   start.merge(self.previous().span))
    
    def function_declaration(self) -> FunctionDeclaration:
        """Parse function name(params)[: type] { body }."""
        start = self.advance().span
        
        name = self.expect_and_advance(
            TokenType.IDENTIFIER,
            MessageType.MISSING_MEMBER_NAME,
            errors.missing_member_name("function"),
        )
        
        self.expect_and_advance(
            TokenType.LPAREN,
            MessageType.MISSING_CASE,
            errors.missing_case("parameters"),
        )
        params = self.parameters()
        
        return_type = None
        if self.suspect_and_advance(TokenType.COLON):
            return_type = self.expect_and_advance(
                TokenType.IDENTIFIER,
                MessageType.MISSING_MEMBER_TYPE,
                errors.missing_member_type("return"),
            ).lexeme
        
        body = self.block()
        
        return FunctionDeclaration(name.lexeme, params, return_type, body,
                                   start.merge(self.previous().span))
    
    def parameters(self) -> Tuple[Parameter, ...]:
        """Parse a parameter list after its opening parenthesis."""
        params = []
        
        if self.suspect_and_advance(TokenType.RPAREN):
            return ()
        
        while True:
            params.append(self.parameter())
            if self.suspect_and_advance(TokenType.COMMA):
                continue
            self.expect_and_advance(
                TokenType.RPAREN,
                MessageType.MISSING_CASE_SEPARATOR_OR_CLOSURE,
                errors.missing_case_separator_or_closure(),
            )
            return tuple(params)
    
    def parameter(self) -> Parameter:
        """Parse name: type."""
        name = self.expect_and_advance(
            TokenType.IDENTIFIER,
            MessageType.MISSING_MEMBER_NAME,
            errors.missing_member_name("parameter"),
        )
        self.expect_and_advance(
            TokenType.COLON,
            MessageType.MISSING_MEMBER_DECLARATION,
            errors.missing_member_declaration(name.lexeme, "parameter"),
        )
        type_name = self.expect_and_advance(
            TokenType.IDENTIFIER,
            MessageType.MISSING_MEMBER_TYPE,
            errors.missing_member_type("parameter"),
        )
        return Parameter(name.lexeme, type_name.lexeme, name.span.merge(type_name.span))
    
    def block(self) -> Tuple[Expression, ...]:
        """
        Parse a brace-delimited statement sequence.
        
        After every newline run the next statement is parsed tentatively.
        If that fails the token position is restored and the sequence ends
        there, leaving the closing brace (or whatever is there) to the
        check below.
        """
        self.expect_and_advance(
            TokenType.LBRACE,
            MessageType.MISSING_BLOCK,
            errors.missing_block(),
        )
        statements = []
        failed_statement: Optional[ParseError] = None
        
        self.skip_newlines()
        if not self.suspect(TokenType.RBRACE) and not self.is_at_end():
            statements.append(self.statement())
            
            while self.skip_newlines() > 0:
                # A failed statement is not an error yet: rewind and let the
                # closing brace check decide
                checkpoint = self.current
                try:
                    statements.append(self.statement())
                except ParseError as e:
                    self.current = checkpoint
                    failed_statement = e
                    break
        
        if self.suspect_and_advance(TokenType.RBRACE):
            return tuple(statements)
        
        if failed_statement is not None and not self.is_at_end():
            raise failed_statement
        if self.is_at_end():
            raise self.error(
                MessageType.MISSING_BLOCK_CLOSURE,
                errors.missing_block_closure(),
            )
        raise self.error(
            MessageType.MISSING_BLOCK_SEPARATOR_OR_CLOSURE,
            errors.missing_block_separator_or_closure(),
        )
    
    def raw_code(self) -> RawCode:
        """Parse raw "text"."""
        start = self.advance().span
        expr = self.math()
        
        if not isinstance(expr, StringLiteral):
            raise ParseError.of(
                MessageType.MISSING_EXPRESSION,
                errors.missing_specific_expression("string"),
                expr.span,
            )
        
        return RawCode(expr.value, start.merge(expr.span))
    
    # =========================================================================
    # Expressions
    # =========================================================================
    
    def math(self) -> Expression:
        """Parse an arithmetic expression; * and / bind tighter than + and -."""
        return self.climb(MATH_PRECEDENCE)
    
    def climb(self, min_precedence: int) -> Expression:
        """Left-associative precedence climbing over atom()."""
        expr = self.atom()
        
        while True:
            precedence = self.operator_precedence()
            if precedence == 0 or precedence < min_precedence:
                return expr
            
            node_type = BINARY_NODES[self.advance().type]
            right = self.climb(precedence + 1)
            expr = node_type(expr, right, expr.span.merge(right.span))
    
    def operator_precedence(self) -> int:
        """Precedence of the current token, 0 if it is not an operator."""
        for type in BINARY_NODES:
            if self.suspect(type):
                return get_precedence(type)
        return 0
    
    def atom(self) -> Expression:
        """Parse primary expressions."""
        token = self.peek()
        
        if self.suspect_and_advance(TokenType.INTEGER):
            return IntegerLiteral(token.value, token.span)
        
        if self.suspect_and_advance(TokenType.STRING):
            return StringLiteral(token.value, token.span)
        
        if self.suspect_and_advance(TokenType.IDENTIFIER):
            return self.identifier(token)
        
        if self.suspect_and_advance(TokenType.LPAREN):
            expr = self.math()
            self.expect_and_advance(
                TokenType.RPAREN,
                MessageType.MISSING_CASE_CLOSURE,
                errors.missing_case_closure(),
            )
            return expr
        
        if self.suspect_and_advance(TokenType.MINUS):
            literal = self.peek().type == TokenType.INTEGER
            operand = self.atom()
            span = token.span.merge(operand.span)
            if literal:
                return IntegerLiteral(-operand.value, span)
            return Subtraction(IntegerLiteral(0, token.span), operand, span)
        
        raise self.error(MessageType.MISSING_EXPRESSION, errors.missing_expression())
    
    def identifier(self, name: Token) -> Expression:
        """Disambiguate assignment, call and access after an identifier."""
        if self.suspect_and_advance(TokenType.ASSIGN):
            value = self.statement()
            return VariableAssign(name.lexeme, value, name.span.merge(value.span))
        
        if self.suspect_and_advance(TokenType.LPAREN):
            arguments = self.arguments()
            return FunctionCall(name.lexeme, arguments, name.span.merge(self.previous().span))
        
        return VariableAccess(name.lexeme, name.span)
    
    def arguments(self) -> Tuple[Expression, ...]:
        """Parse call arguments after the opening parenthesis."""
        args = []
        
        if self.suspect_and_advance(TokenType.RPAREN):
            return ()
        
        while True:
            args.append(self.math())
            if self.suspect_and_advance(TokenType.COMMA):
                continue
            self.expect_and_advance(
                TokenType.RPAREN,
                MessageType.MISSING_CASE_SEPARATOR_OR_CLOSURE,
                errors.missing_case_separator_or_closure(),
            )
            return tuple(args)
    
    # =========================================================================
    # Helper Methods
    # =========================================================================
    
    def expect(self, type: TokenType, message_type: MessageType, details: str) -> Token:
        """Require the current token to be of the given type."""
        if not self.suspect(type):
            raise self.error(message_type, details)
        return self.peek()
    
    def expect_and_advance(self, type: TokenType, message_type: MessageType,
                           details: str) -> Token:
        """Require and consume a token of the given type."""
        self.expect(type, message_type, details)
        return self.advance()
    
    def suspect(self, type: TokenType) -> bool:
        """Check if the current token is of the given type."""
        token = self.peek()
        if token.type == TokenType.ERROR:
            raise ParseError.of(
                MessageType.ILLEGAL_CHARACTER,
                errors.illegal_character(token.lexeme),
                token.span,
            )
        return token.type == type
    
    def suspect_and_advance(self, type: TokenType) -> bool:
        """Consume the current token if it is of the given type."""
        if self.suspect(type):
            self.advance()
            return True
        return False
    
    def skip_newlines(self) -> int:
        """Consume a run of newlines, returning how many there were."""
        count = 0
        while self.suspect_and_advance(TokenType.NEWLINE):
            count += 1
        return count
    
    def advance(self) -> Token:
        """Consume and return the current token."""
        if not self.is_at_end():
            self.current += 1
        return self.previous()
    
    def is_at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self.peek().type == TokenType.EOF
    
    def peek(self) -> Token:
        """Return the current token."""
        return self.tokens[self.current]
    
    def previous(self) -> Token:
        """Return the previous token."""
        return self.tokens[max(self.current - 1, 0)]
    
    def error(self, message_type: MessageType, details: str) -> ParseError:
        """Build a diagnostic pointing at the current token."""
        return ParseError.of(message_type, details, self.peek().span)


def parse(tokens: List[Token]) -> List[Expression]:
    """Parse a token list in one call."""
    return Parser(tokens).parse()
