"""Language/grammar tables for outline extraction.

Maps file suffixes and Pygments lexer aliases to Tree-sitter language names,
and Tree-sitter node types to outline kinds. Regex patterns cover languages
whose parser cannot be loaded.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments.lexers import get_lexer_for_filename, guess_lexer
from pygments.util import ClassNotFound

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".pyw": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".cs": "c_sharp",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".lua": "lua",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
}

LANGUAGE_BY_LEXER_ALIAS: dict[str, str] = {
    "python": "python",
    "python3": "python",
    "py": "python",
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "tsx": "tsx",
    "go": "go",
    "golang": "go",
    "rust": "rust",
    "rs": "rust",
    "java": "java",
    "csharp": "c_sharp",
    "c#": "c_sharp",
    "c": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "ruby": "ruby",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kotlin": "kotlin",
    "scala": "scala",
    "lua": "lua",
    "bash": "bash",
    "sh": "bash",
    "zsh": "bash",
}

# Tree-sitter node type -> outline kind.
CONTAINER_NODE_KINDS: dict[str, str] = {
    "class_definition": "class",
    "class_declaration": "class",
    "class_specifier": "class",
    "struct_specifier": "class",
    "struct_item": "class",
    "impl_item": "class",
    "interface_declaration": "interface",
    "trait_item": "interface",
    "enum_declaration": "enum",
    "enum_item": "enum",
    "enum_specifier": "enum",
}
CALLABLE_NODE_TYPES = {
    "function_definition",
    "function_declaration",
    "function_item",
    "generator_function_declaration",
    "method_definition",
    "method_declaration",
    "constructor_declaration",
}
METHOD_NODE_TYPES = {"method_definition", "method_declaration"}
CONSTRUCTOR_NODE_TYPES = {"constructor_declaration"}
CONSTRUCTOR_NAMES = {"__init__", "constructor", "initialize", "new"}
FIELD_NODE_KINDS: dict[str, str] = {
    "field_declaration": "field",
    "public_field_definition": "field",
    "field_definition": "field",
    "property_declaration": "property",
}
GROUPING_NODE_KINDS: dict[str, str] = {
    "namespace_definition": "namespace",
    "namespace_declaration": "namespace",
    "module": "module",
    "mod_item": "module",
    "package_declaration": "package",
}
DECORATED_NODE_TYPES = {"decorated_definition", "decorated_declaration"}
IDENTIFIER_NODE_TYPES = {
    "identifier",
    "type_identifier",
    "property_identifier",
    "field_identifier",
    "namespace_identifier",
    "constant",
}

MISSING_PARSER_ERROR = (
    "Tree-sitter parser package not found. Install tree-sitter-languages or tree-sitter-language-pack."
)
MAX_OUTLINE_NODES = 2000

_JS_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("class", re.compile(r"^\s*(?:export\s+)?(?:default\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("interface", re.compile(r"^\s*(?:export\s+)?interface\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("enum", re.compile(r"^\s*(?:export\s+)?(?:const\s+)?enum\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("function", re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s*\*?\s*(?P<name>[A-Za-z_$][\w$]*)")),
    (
        "function",
        re.compile(
            r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"
        ),
    ),
)

FALLBACK_PATTERNS_BY_LANGUAGE: dict[str, tuple[tuple[str, re.Pattern[str]], ...]] = {
    "python": (
        ("class", re.compile(r"^\s*class\s+(?P<name>[A-Za-z_][\w]*)")),
        ("function", re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_][\w]*)")),
    ),
    "javascript": _JS_PATTERNS,
    "typescript": _JS_PATTERNS,
    "tsx": _JS_PATTERNS,
    "go": (
        ("class", re.compile(r"^\s*type\s+(?P<name>[A-Za-z_][\w]*)\s+struct\b")),
        ("interface", re.compile(r"^\s*type\s+(?P<name>[A-Za-z_][\w]*)\s+interface\b")),
        ("function", re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_][\w]*)\s*\(")),
    ),
    "rust": (
        ("class", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?struct\s+(?P<name>[A-Za-z_][\w]*)\b")),
        ("enum", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?enum\s+(?P<name>[A-Za-z_][\w]*)\b")),
        ("interface", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?trait\s+(?P<name>[A-Za-z_][\w]*)\b")),
        ("function", re.compile(r"^\s*(?:pub(?:\([^)]*\))?\s+)?(?:async\s+)?fn\s+(?P<name>[A-Za-z_][\w]*)\s*[<(]")),
    ),
    "java": (
        ("class", re.compile(r"^\s*(?:(?:public|private|protected|abstract|final|static)\s+)*class\s+(?P<name>[A-Za-z_][\w]*)\b")),
        ("interface", re.compile(r"^\s*(?:(?:public|private|protected)\s+)?interface\s+(?P<name>[A-Za-z_][\w]*)\b")),
        ("enum", re.compile(r"^\s*(?:(?:public|private|protected)\s+)?enum\s+(?P<name>[A-Za-z_][\w]*)\b")),
    ),
    "ruby": (
        ("class", re.compile(r"^\s*class\s+(?P<name>[A-Za-z_][\w:]*)")),
        ("function", re.compile(r"^\s*def\s+(?P<name>[A-Za-z_][\w!?=.]*)")),
    ),
    "php": (
        ("class", re.compile(r"^\s*(?:final\s+|abstract\s+)?class\s+(?P<name>[A-Za-z_][\w]*)")),
        ("interface", re.compile(r"^\s*interface\s+(?P<name>[A-Za-z_][\w]*)")),
        (
            "function",
            re.compile(r"^\s*(?:public|private|protected|static|final|abstract|\s)*function\s+(?P<name>[A-Za-z_][\w]*)"),
        ),
    ),
    "kotlin": (
        ("class", re.compile(r"^\s*(?:(?:public|private|internal|open|data|abstract)\s+)*class\s+(?P<name>[A-Za-z_][\w]*)")),
        ("interface", re.compile(r"^\s*(?:(?:public|private|internal)\s+)?interface\s+(?P<name>[A-Za-z_][\w]*)")),
        (
            "function",
            re.compile(r"^\s*(?:(?:public|private|internal|open|override|suspend)\s+)*fun\s+(?P<name>[A-Za-z_][\w]*)"),
        ),
    ),
    "lua": (
        ("function", re.compile(r"^\s*(?:local\s+)?function\s+(?P<name>[A-Za-z_][\w\.:]*)")),
    ),
    "bash": (
        ("function", re.compile(r"^\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\(\)\s*\{")),
        ("function", re.compile(r"^\s*function\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\b")),
    ),
}

GENERIC_FALLBACK_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("class", re.compile(r"^\s*(?:export\s+)?class\s+(?P<name>[A-Za-z_][\w$]*)")),
    ("class", re.compile(r"^\s*(?:pub\s+)?struct\s+(?P<name>[A-Za-z_][\w]*)\b")),
    ("function", re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_][\w]*)")),
    ("function", re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ("function", re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_][\w]*)\s*\(")),
)


def _language_for_lexer_aliases(aliases: list[str]) -> str | None:
    for alias in aliases:
        language = LANGUAGE_BY_LEXER_ALIAS.get(alias.lower())
        if language is not None:
            return language
    return None


def detect_language(path: Path | None, text: str = "") -> str | None:
    """Resolve the outline language for a document.

    Uses the suffix table first, then asks Pygments for a lexer by filename
    and, for files without a usable name, by content.
    """
    if path is not None:
        language = LANGUAGE_BY_SUFFIX.get(path.suffix.lower())
        if language is not None:
            return language
        try:
            lexer = get_lexer_for_filename(path.name, text)
        except ClassNotFound:
            lexer = None
        if lexer is not None:
            language = _language_for_lexer_aliases(list(lexer.aliases))
            if language is not None:
                return language
    if not text.strip():
        return None
    try:
        lexer = guess_lexer(text)
    except ClassNotFound:
        return None
    return _language_for_lexer_aliases(list(lexer.aliases))
