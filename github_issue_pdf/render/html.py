"""GitHub-styled HTML documents for issues that cannot be loaded publicly."""

from datetime import datetime
from html import escape

import markdown2

from ..github_client.models import GitHubComment, GitHubIssue, GitHubLabel

MARKDOWN_EXTRAS = ["fenced-code-blocks", "tables", "strike", "task_list", "cuddled-lists"]

DARK_TEXT = "#24292f"
LIGHT_TEXT = "#ffffff"

PAGE_STYLES = """
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
    padding: 20px;
    max-width: 980px;
    margin: 0 auto;
    color: #24292f;
}
h1 { font-size: 20px; margin-bottom: 8px; font-weight: 600; }
.meta { color: #57606a; font-size: 10px; margin-bottom: 16px; }
.labels { margin: 16px 0; }
.label {
    display: inline-block;
    padding: 0 7px;
    font-size: 10px;
    font-weight: 500;
    line-height: 18px;
    border-radius: 2em;
    margin-right: 4px;
}
.body {
    font-size: 10px;
    line-height: 1.5;
    padding: 16px 0;
    border-bottom: 1px solid #d0d7de;
}
.comments-header { font-size: 16px; margin: 24px 0 16px 0; font-weight: 600; }
.comment { margin: 16px 0; border: 1px solid #d0d7de; border-radius: 6px; }
.comment-header {
    padding: 8px 16px;
    background-color: #f6f8fa;
    border-bottom: 1px solid #d0d7de;
    font-size: 10px;
    color: #57606a;
}
.comment-body { padding: 16px; font-size: 10px; line-height: 1.5; }
pre {
    background: #f6f8fa;
    padding: 16px;
    border-radius: 6px;
    overflow-x: auto;
    font-size: 10px;
    line-height: 1.45;
}
code {
    background: rgba(175, 184, 193, 0.2);
    padding: 2px 6px;
    border-radius: 6px;
    font-size: 85%;
    font-family: ui-monospace, SFMono-Regular, "SF Mono", Menlo, Consolas, monospace;
}
pre code { background: none; padding: 0; }
img { max-width: 100%; height: auto; }
blockquote { margin: 0; padding: 0 1em; color: #57606a; border-left: 0.25em solid #d0d7de; }
a { color: #0969da; text-decoration: none; }
a:hover { text-decoration: underline; }
table { border-collapse: collapse; width: 100%; }
table th, table td { padding: 6px 13px; border: 1px solid #d0d7de; }
table tr:nth-child(2n) { background-color: #f6f8fa; }
"""


def contrast_color(hex_color: str) -> str:
    """Pick dark or light text for a label background.

    Args:
        hex_color: Background colour without the leading ``#``

    Returns:
        Text colour with the leading ``#``
    """
    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    luminance = (r * 299 + g * 587 + b * 114) / 1000
    return DARK_TEXT if luminance >= 128 else LIGHT_TEXT


def format_timestamp(value: datetime) -> str:
    return value.strftime("%b %d, %Y, %H:%M %Z").strip()


class IssueHTMLGenerator:
    """Builds a complete HTML document for one issue and its comments."""

    def __init__(self, styles: str = PAGE_STYLES):
        self.styles = styles

    def generate(self, issue: GitHubIssue) -> str:
        """Generate the HTML document for an issue.

        Args:
            issue: Issue with its labels and comments

        Returns:
            Complete HTML document
        """
        count = len(issue.comments)
        comments_header = ""
        if count > 0:
            plural = "s" if count > 1 else ""
            comments_header = (
                f'<h2 class="comments-header">{count} comment{plural}</h2>'
            )
        comments = "".join(self._render_comment(c) for c in issue.comments)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>#{issue.number} {escape(issue.title)}</title>
<style>{self.styles}</style>
</head>
<body>
<h1>#{issue.number} {escape(issue.title)}</h1>
<div class="meta">{self._render_meta(issue)}</div>
{self._render_labels(issue.labels)}
<div class="body">{self.render_markdown(issue.body)}</div>
{comments_header}
{comments}
</body>
</html>
"""

    def render_markdown(self, text: str | None) -> str:
        if not text:
            return "<p><em>No description provided.</em></p>"
        # Raw HTML in issue bodies is shown as text, never run by the browser.
        return str(
            markdown2.markdown(text, extras=MARKDOWN_EXTRAS, safe_mode="escape")
        )

    def _render_meta(self, issue: GitHubIssue) -> str:
        opened = format_timestamp(issue.created_at)
        if issue.state == "closed" and issue.closed_at is not None:
            state = (
                f'<span style="color: #8250df;">Closed</span> on '
                f"{format_timestamp(issue.closed_at)}"
            )
        else:
            state = '<span style="color: #1a7f37;">Open</span>'
        return (
            f"<strong>{escape(issue.user.login)}</strong> opened this issue on "
            f"{opened} • {state}"
        )

    def _render_labels(self, labels: list[GitHubLabel]) -> str:
        if not labels:
            return ""
        items = "".join(
            f'<span class="label" style="background-color: #{label.color}; '
            f'color: {contrast_color(label.color)};">{escape(label.name)}</span>'
            for label in labels
        )
        return f'<div class="labels">{items}</div>'

    def _render_comment(self, comment: GitHubComment) -> str:
        return f"""
<div class="comment">
<div class="comment-header"><strong>{escape(comment.user.login)}</strong> commented on {format_timestamp(comment.created_at)}</div>
<div class="comment-body">{self.render_markdown(comment.body)}</div>
</div>
"""
