"""
Literal ``{{name}}`` placeholder handling shared by message and document
templates. This is plain token replacement, not a template engine: tokens
with no matching variable are left in place.
"""
import re

PLACEHOLDER_PATTERN = re.compile(r'\{\{(\w+)\}\}')


def render_placeholders(content, variables=None):
    if not content:
        return content or ''
    rendered = content
    for key, value in (variables or {}).items():
        rendered = rendered.replace('{{' + str(key) + '}}', '' if value is None else str(value))
    return rendered


def extract_placeholders(content):
    """Return placeholder names in order of first appearance"""
    seen = []
    for name in PLACEHOLDER_PATTERN.findall(content or ''):
        if name not in seen:
            seen.append(name)
    return seen
