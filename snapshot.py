"""
Read-only content snapshot handed to the evaluation and improvement functions,
plus a loader that builds one from a markdown post with YAML frontmatter.
"""

import html
import re
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

FIELDS = (
    "title", "metaTitle", "metaDescription", "urlSlug", "primaryKeyword",
    "secondaryKeywords", "content", "toc", "images", "internalLinks",
    "externalLinks", "language", "targetCountry",
)

# frontmatter key -> snapshot field
FRONTMATTER_FIELDS = {
    "title": "title",
    "meta_title": "metaTitle",
    "metaTitle": "metaTitle",
    "description": "metaDescription",
    "meta_description": "metaDescription",
    "metaDescription": "metaDescription",
    "slug": "urlSlug",
    "url_slug": "urlSlug",
    "urlSlug": "urlSlug",
    "keyword": "primaryKeyword",
    "primary_keyword": "primaryKeyword",
    "primaryKeyword": "primaryKeyword",
    "secondary_keywords": "secondaryKeywords",
    "secondaryKeywords": "secondaryKeywords",
    "toc": "toc",
    "images": "images",
    "language": "language",
    "lang": "language",
    "country": "targetCountry",
    "target_country": "targetCountry",
    "targetCountry": "targetCountry",
}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


class ContentSnapshot(Mapping):
    """Immutable view over the current field values of an article."""

    def __init__(self, values: Mapping | None = None, **fields):
        data = dict(values or {})
        data.update(fields)
        self._values = MappingProxyType(data)

    def get_value(self, key: str) -> Any:
        return self._values.get(key)

    def text(self, key: str) -> str:
        value = self._values.get(key)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return " ".join(str(v) for v in value)
        return str(value)

    def items_of(self, key: str) -> list:
        value = self._values.get(key)
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return [value]

    def is_blank(self, key: str) -> bool:
        return is_blank(self._values.get(key))

    def replace(self, **changes) -> "ContentSnapshot":
        return ContentSnapshot(self._values, **changes)

    def with_value(self, key: str, value: Any) -> "ContentSnapshot":
        return ContentSnapshot(self._values, **{key: value})

    def to_dict(self) -> dict:
        return dict(self._values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        filled = [k for k in self._values if not is_blank(self._values[k])]
        return f"ContentSnapshot({', '.join(filled)})"


def parse_frontmatter(content: str) -> tuple[dict, str]:
    frontmatter = {}
    body = content
    fm_match = re.match(r'^---\s*\n(.*?)\n---\s*\n(.*)$', content, re.DOTALL)
    if fm_match:
        try:
            frontmatter = yaml.safe_load(fm_match.group(1)) or {}
        except yaml.YAMLError:
            frontmatter = {}
        body = fm_match.group(2)
    if not isinstance(frontmatter, dict):
        frontmatter = {}
    return frontmatter, body


def slugify(text: str) -> str:
    text = text.lower().strip()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    text = re.sub(r'-+', '-', text)
    return text.strip('-')


def _inline_format(text: str) -> str:
    text = html.escape(text, quote=False)
    text = re.sub(r'!\[([^\]]*)\]\(([^\)]+)\)', r'<img src="\2" alt="\1">', text)
    text = re.sub(r'\[([^\]]+)\]\(([^\)]+)\)', r'<a href="\2">\1</a>', text)
    text = re.sub(r'\*\*([^*]+)\*\*', r'<strong>\1</strong>', text)
    text = re.sub(r'\*([^*]+)\*', r'<em>\1</em>', text)
    return text


def markdown_to_html(body: str) -> str:
    """Convert a markdown body to the HTML fragment stored in the ``content`` field."""
    html_lines = []
    paragraph_lines = []
    list_tag = None

    def flush_paragraph():
        if paragraph_lines:
            html_lines.append(f'<p>{_inline_format(" ".join(paragraph_lines))}</p>')
            paragraph_lines.clear()

    def close_list():
        nonlocal list_tag
        if list_tag:
            html_lines.append(f'</{list_tag}>')
            list_tag = None

    for line in body.strip().split('\n'):
        stripped = line.strip()

        if not stripped:
            flush_paragraph()
            close_list()
            continue

        h_match = re.match(r'^(#{1,6})\s+(.+)$', stripped)
        if h_match:
            flush_paragraph()
            close_list()
            level = len(h_match.group(1))
            html_lines.append(f'<h{level}>{_inline_format(h_match.group(2))}</h{level}>')
            continue

        ul_match = re.match(r'^[-*]\s+(.+)$', stripped)
        ol_match = re.match(r'^\d+\.\s+(.+)$', stripped)
        if ul_match or ol_match:
            flush_paragraph()
            tag = 'ul' if ul_match else 'ol'
            if list_tag != tag:
                close_list()
                html_lines.append(f'<{tag}>')
                list_tag = tag
            item = (ul_match or ol_match).group(1)
            html_lines.append(f'<li>{_inline_format(item)}</li>')
            continue

        close_list()
        paragraph_lines.append(stripped)

    flush_paragraph()
    close_list()
    return '\n'.join(html_lines)


def _split_links(body: str, site_url: str | None) -> tuple[list[str], list[str]]:
    internal, external = [], []
    for match in re.finditer(r'(?<!!)\[[^\]]+\]\(([^\)\s]+)\)', body):
        url = match.group(1)
        if url.startswith(('/', '#')) or (site_url and site_url in url):
            internal.append(url)
        elif url.startswith(('http://', 'https://')):
            external.append(url)
    return internal, external


def snapshot_from_post(content: str, site_url: str | None = None) -> ContentSnapshot:
    """Map a markdown post's frontmatter and body onto snapshot fields."""
    frontmatter, body = parse_frontmatter(content)
    values: dict[str, Any] = {}
    for key, value in frontmatter.items():
        target = FRONTMATTER_FIELDS.get(key)
        if target and value is not None:
            values[target] = value

    keywords = frontmatter.get("keywords")
    if isinstance(keywords, str):
        keywords = [k.strip() for k in keywords.split(",") if k.strip()]
    if isinstance(keywords, list) and keywords:
        values.setdefault("primaryKeyword", str(keywords[0]))
        primary = str(values["primaryKeyword"]).lower()
        values.setdefault("secondaryKeywords", [str(k) for k in keywords if str(k).lower() != primary])

    if "title" in values:
        values.setdefault("metaTitle", values["title"])
        values.setdefault("urlSlug", slugify(str(values["title"])))
    for key in ("title", "metaTitle", "metaDescription", "urlSlug", "primaryKeyword"):
        if key in values:
            values[key] = str(values[key])

    values["content"] = markdown_to_html(body)
    internal, external = _split_links(body, site_url)
    values["internalLinks"] = internal
    values["externalLinks"] = external
    return ContentSnapshot(values)


def load_post(path: str | Path, site_url: str | None = None) -> ContentSnapshot:
    return snapshot_from_post(Path(path).read_text(encoding="utf-8"), site_url=site_url)
