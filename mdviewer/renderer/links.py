# mdviewer/renderer/links.py
"""Rewrite Obsidian-style links and embeds into standard Markdown.

    ![[diagram.png]]      -> ![diagram](./diagram.png)
    ![[diagram.png|400]]  -> ![diagram|width=400](./diagram.png)
    [[Note]]              -> [Note](./Note.md)
    [[Notes/Foo|See Foo]] -> [See Foo](./Notes/Foo)

The image detector and the styler only understand standard syntax, so
this runs before detection. Lines inside fenced code blocks are left
untouched.
"""

import os
import re

from .detect import FENCE

# ![[path]] or ![[path|width]]
_EMBED_RE = re.compile(r"!\[\[([^\]|]+)(\|([0-9]+))?\]\]")
# [[target]] or [[target|Label]]
_WIKI_LINK_RE = re.compile(r"\[\[([^\]|]+)(\|([^\]]+))?\]\]")


def _normalize_path(path: str) -> str:
    if not path.startswith("./") and not path.startswith("/"):
        return "./" + path
    return path


def _rewrite_embed(match: re.Match) -> str:
    path = _normalize_path(match.group(1).strip())
    width = (match.group(3) or "").strip()

    # Alt text: base name without extension
    alt = os.path.basename(path)
    dot = alt.rfind(".")
    if dot != -1:
        alt = alt[:dot]

    # The image detector picks the width back up from the alt text
    if width:
        alt = f"{alt}|width={width}"

    return f"![{alt}]({path})"


def _rewrite_wiki_link(match: re.Match) -> str:
    target = match.group(1).strip()
    label = (match.group(3) or "").strip() or target

    if "/" not in target and "." not in target:
        # Bare note name
        href = f"./{target}.md"
    else:
        href = _normalize_path(target)

    return f"[{label}]({href})"


def preprocess_links(content: str) -> str:
    """Rewrite wiki links and image embeds outside fenced code blocks."""
    out = []
    in_code_fence = False

    for line in content.split("\n"):
        if line.strip().startswith(FENCE):
            in_code_fence = not in_code_fence
            out.append(line)
            continue

        if in_code_fence:
            out.append(line)
            continue

        # Embeds first: they start with ![[ and would otherwise match as links
        processed = _EMBED_RE.sub(_rewrite_embed, line)
        processed = _WIKI_LINK_RE.sub(_rewrite_wiki_link, processed)
        out.append(processed)

    return "\n".join(out)
