import os
from typing import Iterable, List, Optional, Tuple

TEXT_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".html", ".css", ".scss", ".json", ".md", ".txt",
    ".py", ".go", ".java", ".c", ".cpp", ".h", ".hpp", ".rs", ".rb", ".php",
    ".yml", ".yaml", ".toml", ".ini", ".sh", ".xml", ".env", ".gitignore",
    ".svg",
)
TEXT_FILENAMES_NO_EXT = {"dockerfile", "procfile", "readme", "license"}


def is_text_file(path: str) -> bool:
    """
    True when the file name looks like source/text: a known extension, or one of
    the usual extensionless names (Dockerfile, Procfile, ...). Only the last path
    segment is inspected.
    """
    name = path.replace("\\", "/").rsplit("/", 1)[-1].lower()
    if not name:
        return False
    if "." not in name:
        return name in TEXT_FILENAMES_NO_EXT
    return name.endswith(TEXT_EXTENSIONS)


def strip_common_root(paths_and_content: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
    """
    If every path starts with the same first segment followed by '/', drop that
    segment. Entries that become empty (the root folder itself) are removed.
    """
    if not paths_and_content:
        return paths_and_content
    first = paths_and_content[0][0]
    if "/" not in first:
        return paths_and_content
    root = first.split("/", 1)[0] + "/"
    if not all(p.startswith(root) for p, _ in paths_and_content):
        return paths_and_content
    stripped = [(p[len(root):], c) for p, c in paths_and_content]
    return [(p, c) for p, c in stripped if p]


def dedupe_paths(paths_and_content: Iterable[Tuple[str, str]]) -> List[Tuple[str, str]]:
    # first occurrence wins
    seen = set()
    out = []
    for p, c in paths_and_content:
        if p in seen:
            continue
        seen.add(p)
        out.append((p, c))
    return out


# --- Helper: safe path normalize & reject traversal/abs paths ---
def _safe_normalize(p: str) -> Optional[str]:
    if not isinstance(p, str) or p.strip() == "":
        return None
    p = p.replace("\\", "/")
    # disallow absolute paths
    if p.startswith("/") or os.path.isabs(p):
        return None
    clean = os.path.normpath(p).replace("\\", "/")
    if clean == ".." or clean.startswith("../") or "/../" in clean:
        return None
    while clean.startswith("./"):
        clean = clean[2:]
    if clean in ("", "."):
        return None
    return clean
