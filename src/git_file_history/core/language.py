"""Map file names to language hints for syntax highlighting."""

import re
from typing import List, Tuple

FALLBACK_LANGUAGE = "text"

_PATTERNS: List[Tuple[str, str]] = [
    # JavaScript/TypeScript
    ("javascript", r"\.(js|mjs|cjs)$"),
    ("jsx", r"\.jsx$"),
    ("typescript", r"\.ts$"),
    ("tsx", r"\.tsx$"),
    # Data formats
    ("json", r"\.json$|\.babelrc$"),
    ("yaml", r"\.ya?ml$"),
    ("toml", r"\.toml$"),
    ("ini", r"\.(ini|cfg)$|\.editorconfig$"),
    # Web
    ("html", r"\.html?$"),
    ("xml", r"\.(xml|svg|mathml)$"),
    ("css", r"\.css$"),
    ("less", r"\.less$"),
    ("scss", r"\.scss$"),
    ("sass", r"\.sass$"),
    # Shell
    ("bash", r"\.(sh|bash)$"),
    ("powershell", r"\.psm?1$"),
    ("bat", r"\.(bat|cmd)$"),
    # General purpose
    ("python", r"\.pyi?$"),
    ("ruby", r"\.rb$"),
    ("rust", r"\.rs$"),
    ("go", r"\.go$"),
    ("java", r"\.java$"),
    ("kotlin", r"\.kts?$"),
    ("scala", r"\.scala$"),
    ("swift", r"\.swift$"),
    ("dart", r"\.dart$"),
    ("c", r"\.[ch]$"),
    ("cpp", r"\.(cpp|cc|cxx|hpp)$"),
    ("csharp", r"\.cs$"),
    ("objective-c", r"\.mm?$"),
    ("haskell", r"\.hs$"),
    ("clojure", r"\.clj[sc]?$"),
    ("fsharp", r"\.fsx?$"),
    ("ocaml", r"\.mli?$"),
    ("php", r"\.php$"),
    ("perl", r"\.p[lm]$"),
    ("lua", r"\.lua$"),
    ("r", r"\.r$"),
    ("elixir", r"\.exs?$"),
    ("erlang", r"\.erl$"),
    # Query languages
    ("sql", r"\.sql$"),
    ("graphql", r"\.(graphql|gql)$"),
    # Build and config
    ("dockerfile", r"dockerfile$"),
    ("makefile", r"(^|/)makefile$|\.mk$"),
    ("nginx", r"nginx\.conf$"),
    # Documentation
    ("markdown", r"\.mdx?$"),
    ("rst", r"\.rst$"),
    ("latex", r"\.tex$"),
    # Templates
    ("handlebars", r"\.(hbs|handlebars)$"),
    ("vue", r"\.vue$"),
    ("svelte", r"\.svelte$"),
    ("diff", r"\.(diff|patch)$"),
]

_COMPILED = [(lang, re.compile(pattern, re.IGNORECASE)) for lang, pattern in _PATTERNS]


def detect_language(filename: str) -> str:
    """Return the language hint for ``filename``, or ``text`` when unknown."""
    for lang, regex in _COMPILED:
        if regex.search(filename):
            return lang
    return FALLBACK_LANGUAGE
