"""
Line-by-line code explanations from simple keyword matching.
"""
from typing import Dict, List

from veer.exceptions import ValidationError

LANGUAGES = (
    "javascript", "typescript", "python", "java", "cpp", "csharp",
    "ruby", "php", "sql", "html", "css",
)

# First match wins; substring checks, so "format" counts as a loop ("for")
RULES = [
    (("function", "def", "void"), "Declares a function/method that performs a specific task."),
    (("for", "while"), "Loop statement that repeats a block of code multiple times."),
    (("if", "else"), "Conditional statement that executes code based on a condition."),
    (("return",), "Returns a value from the function to the caller."),
    (("=",), "Variable assignment - stores a value in a variable."),
    (("const", "let", "var"), "Variable declaration with different scoping rules."),
    (("class", "struct"), "Defines a class/structure that serves as a blueprint for objects."),
]

DEFAULT_EXPLANATION = "Executes a statement or expression."


def explain_line(line: str) -> str:
    for keywords, explanation in RULES:
        if any(keyword in line for keyword in keywords):
            return explanation
    return DEFAULT_EXPLANATION


def explain_code(code: str) -> List[Dict]:
    """
    Explain each non-blank line of ``code``.

    Returns:
        ``[{"line", "lineNumber", "explanation"}]``; line numbers count only
        the non-blank lines, starting at 1

    Raises:
        ValidationError: ``code`` is empty or whitespace
    """
    if not (code or "").strip():
        raise ValidationError("Please enter code to explain", field="code")
    lines = [line for line in code.split("\n") if line.strip()]
    return [
        {"line": line, "lineNumber": number, "explanation": explain_line(line)}
        for number, line in enumerate(lines, start=1)
    ]
