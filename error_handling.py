"""
Error taxonomy and error reporting for Paren
Every failure aborts the whole run; the first error raised is the one reported
"""

from typing import Optional, Dict
from pyparsing import col, lineno


# ============================================================================
# ERROR TAXONOMY
# ============================================================================

class ParenError(Exception):
    """Base class for every error surfaced by the Paren pipeline"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ParenTokenizerError(ParenError):
    """Token classification impossible. The tokenizer is total, so this is never raised today"""
    pass


class ParenSourceError(ParenError):
    """Program text could not be loaded"""
    pass


class ParenParseError(ParenError):
    """Structural error in the program text"""

    MISSING_IDENTIFIER = "missing_identifier"
    MISSING_OPEN_PAREN = "missing_open_paren"
    MISSING_CLOSE_PAREN = "missing_close_paren"
    UNEXPECTED_TOKEN = "unexpected_token"

    def __init__(self, message: str, kind: str, location: int = 0, line: int = 0, column: int = 0,
                 context: Optional[str] = None):
        self.kind = kind
        self.location = location
        self.line = line
        self.column = column
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        return format_parse_error(make_parse_error(
            self.message, self.location, self.line, self.column, self.context
        ))


class ParenRuntimeError(ParenError):
    """Base class for evaluation errors"""
    pass


class UndeclaredVariable(ParenRuntimeError):
    pass


class UndeclaredFunction(ParenRuntimeError):
    pass


class ArityMismatch(ParenRuntimeError):
    pass


class TypeMismatch(ParenRuntimeError):
    """A specific literal kind (identifier, boolean, function, numeric...) was required"""
    pass


class NotAFunction(ParenRuntimeError):
    pass


class IncomparableTypes(ParenRuntimeError):
    pass


class UnsupportedOperation(ParenRuntimeError):
    pass


# ============================================================================
# PARSE ERROR STRUCTURES
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    context: Optional[str] = None
) -> Dict:
    """Create a parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'context': context,
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    if not error['line']:
        return f"Parse error: {error['message']}"

    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}"

    if error['context']:
        error_msg += f"\n{error['context']}"

    return error_msg


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def locate_parse_error(message: str, kind: str, source_text: str, location: int) -> ParenParseError:
    """Build a ParenParseError with line, column and context resolved from a character offset"""
    # Offsets past the end point at the end of input
    location = max(0, min(location, len(source_text)))
    if not source_text:
        return ParenParseError(message, kind, location)

    line_num = lineno(location, source_text)
    col_num = col(location, source_text)
    context = get_context_lines(source_text, line_num, col_num)
    return ParenParseError(message, kind, location, line_num, col_num, context)


# ============================================================================
# ERROR REPORTING
# ============================================================================

class ParenErrorHandler:
    """Turns pipeline errors into printable reports for the command line"""
    def __init__(self, filename: str = "<input>"):
        self.filename = filename

    def report(self, error: BaseException) -> str:
        """Format any pipeline error for display"""
        if isinstance(error, ParenParseError):
            return f"{self.filename}: {error}"
        if isinstance(error, ParenRuntimeError):
            return f"{self.filename}: Runtime error ({type(error).__name__}): {error.message}"
        if isinstance(error, ParenSourceError):
            return f"Error: {error.message}"
        if isinstance(error, RecursionError):
            return f"{self.filename}: Runtime error: maximum recursion depth exceeded"
        if isinstance(error, ParenError):
            return f"{self.filename}: {error.message}"
        return f"{self.filename}: Unexpected error: {error}"
