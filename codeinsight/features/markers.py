"""Declarative table of structural markers recognised in code text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Marker:
    """A structural marker: a regex over comment-free code plus a rarity weight.

    ``rarity`` says how surprising the marker is when a purpose does not expect
    it; the anomaly detector uses it as the deviation for unexpected presence.
    """

    name: str
    pattern: re.Pattern[str]
    rarity: float
    description: str


def _marker(name: str, pattern: str, rarity: float, description: str, flags: int = 0) -> Marker:
    return Marker(name=name, pattern=re.compile(pattern, flags), rarity=rarity, description=description)


# Declaration order is the tie-break order everywhere markers are ranked.
MARKERS: Tuple[Marker, ...] = (
    _marker("class_declaration", r"\bclass\s+[A-Za-z_$][\w$]*", 0.2, "class declaration"),
    _marker("constructor", r"\bconstructor\s*\(|\bdef\s+__init__\s*\(", 0.3, "constructor"),
    _marker(
        "instance_state",
        r"\b(?:this|self)\.[A-Za-z_$][\w$]*\s*=(?!=)",
        0.2,
        "instance state assignment",
    ),
    _marker(
        "method_definition",
        r"^[ \t]*(?:(?:static|async|get|set)\s+)*(?!(?:if|for|while|switch|catch|return|function|else)\b)"
        r"[A-Za-z_$][\w$]*\s*\([^()\n]*\)\s*\{|^[ \t]+(?:async\s+)?def\s+\w+\s*\(",
        0.1,
        "method definition",
        re.MULTILINE,
    ),
    _marker(
        "function_definition",
        r"\bfunction\b|=>|^[ \t]*(?:async\s+)?def\s+\w+\s*\(|\blambda\b",
        0.05,
        "function definition",
        re.MULTILINE,
    ),
    _marker(
        "static_method",
        r"\bstatic\s+(?:async\s+)?[A-Za-z_$][\w$]*\s*\(|@staticmethod\b|@classmethod\b",
        0.5,
        "static or class-level method",
    ),
    _marker(
        "static_instance",
        r"\bstatic\s+#?_?instance\b|\b[A-Z][\w$]*\._?instance\b|\bcls\._instance\b",
        0.7,
        "shared static instance",
    ),
    _marker(
        "type_dispatch",
        r"\bswitch\s*\(|\bcase\s+['\"`]|\b\w*(?:type|kind|Type|Kind)\s*={2,3}\s*['\"`]|\bmatch\s+\w+\s*:"
        r"|\[\s*(?:type|kind)\s*\]",
        0.5,
        "dispatch on a type discriminator",
    ),
    _marker(
        "creation_call",
        r"\bnew\s+[A-Z][\w$]*\s*\(|\breturn\s+[A-Z][a-z]\w*\(",
        0.3,
        "object instantiation",
    ),
    _marker(
        "create_method",
        r"\b(?:create|make)(?:[A-Z_]\w*)?\s*\(",
        0.4,
        "creation method",
    ),
    _marker(
        "return_self",
        r"\breturn\s+(?:this|self)\b\s*;?\s*(?:$|\})",
        0.6,
        "method returning its own instance",
        re.MULTILINE,
    ),
    _marker("with_method", r"\bwith[A-Z_]\w*\s*\(", 0.6, "with* configuration method"),
    _marker("build_method", r"\bbuild\s*\(", 0.6, "build method"),
    _marker(
        "method_chaining",
        r"\)\s*\.\s*[A-Za-z_$][\w$]*\s*\([^()\n]*\)\s*\.\s*[A-Za-z_$][\w$]*\s*\(",
        0.3,
        "chained method calls",
    ),
    _marker("conditional", r"\bif\b|\belif\b", 0.05, "conditional branch"),
    _marker("loop", r"\bfor\b|\bwhile\b|\.forEach\s*\(", 0.1, "loop"),
    _marker(
        "comparison",
        r"===|!==|\bisinstance\s*\(|\btypeof\b|\s[<>]=?\s",
        0.1,
        "explicit comparison or type check",
    ),
    _marker("try_catch", r"\btry\s*[:{]|\bcatch\s*[({]|\bexcept\b", 0.4, "exception handling block"),
    _marker("throw", r"\bthrow\b|\braise\b", 0.3, "raised error"),
    _marker(
        "regex",
        r"\bRegExp\b|\bre\.(?:compile|match|search|fullmatch|sub)\s*\(|(?i:\bregex\w*)|\.test\s*\(",
        0.4,
        "regular expression",
    ),
    _marker(
        "network_call",
        r"\bfetch\s*\(|\baxios\b|\bXMLHttpRequest\b|https?://|\brequests\.(?:get|post|put|delete|patch)\b"
        r"|\bhttpx\b|\burlopen\s*\(|\.(?:get|post|put|delete|patch)\s*\(\s*['\"`](?:https?:)?/",
        0.8,
        "network call",
    ),
    _marker("async", r"\basync\b|\bawait\b|\.then\s*\(|\bPromise\b", 0.4, "asynchronous flow"),
    _marker(
        "data_access",
        r"\.(?:find\w*|save|insert\w*|delete|remove|query|select|upsert|persist)\s*\(|\bSELECT\b|\bINSERT\s+INTO\b",
        0.5,
        "data access call",
    ),
    _marker(
        "storage_access",
        r"\blocalStorage\b|\bsessionStorage\b|\bdatabase\b|\bdb\.\w+|\bcursor\.execute\b|\bsqlite3\b|\bredis\b",
        0.6,
        "storage backend access",
    ),
    _marker(
        "delegation",
        r"\b(?:this|self)\.[A-Za-z_$][\w$]*\.[A-Za-z_$][\w$]*\s*\(",
        0.3,
        "call delegated to a held collaborator",
    ),
    _marker(
        "subscribe",
        r"\.(?:on|once|subscribe|addEventListener|addListener|attach|register)\s*\(|\bdef\s+subscribe\b"
        r"|^[ \t]*subscribe\s*\(",
        0.6,
        "subscription or listener registration",
        re.MULTILINE,
    ),
    _marker(
        "emit",
        r"\.(?:emit|dispatchEvent|publish|trigger)\s*\(|\bnotify\w*\s*\(|\bdef\s+notify\w*\b",
        0.6,
        "event emission",
    ),
    _marker(
        "listener_collection",
        r"\b(?:listeners|observers|subscribers|handlers|callbacks)\b",
        0.6,
        "collection of listeners",
    ),
    _marker(
        "collection_transform",
        r"\.(?:map|filter|reduce|flatMap)\s*\(|\b(?:map|filter|reduce|sorted|zip)\s*\("
        r"|\[[^\[\]\n]+\bfor\b[^\[\]\n]+\bin\b",
        0.3,
        "collection transformation",
    ),
    _marker(
        "dom_access",
        r"\bdocument\.\w+|\bwindow\.\w+|\bquerySelector(?:All)?\b|\binnerHTML\b|\bsetState\b"
        r"|<[A-Za-z][\w-]*[\s/>]",
        0.7,
        "DOM or view rendering",
    ),
    _marker(
        "logging_call",
        r"\bconsole\.(?:log|warn|error|info|debug)\b|\blogger\.\w+\s*\(|\blogging\.\w+\s*\(|\bprint\s*\(",
        0.3,
        "logging",
    ),
    _marker(
        "module_import",
        r"^[ \t]*import\b|\brequire\s*\(|^[ \t]*from\s+[\w.]+\s+import\b",
        0.1,
        "module import",
        re.MULTILINE,
    ),
    _marker("module_export", r"\bexport\b|\bmodule\.exports\b|\b__all__\b", 0.1, "module export"),
    _marker(
        "arithmetic",
        r"\bMath\.\w+|\bmath\.\w+|[+\-*/]=|\w\s*[*/]\s*\w",
        0.2,
        "arithmetic",
    ),
)

MARKERS_BY_NAME: Dict[str, Marker] = {marker.name: marker for marker in MARKERS}


__all__ = ["MARKERS", "MARKERS_BY_NAME", "Marker"]
