"""Read an issue description from a markdown file with optional YAML frontmatter."""

from pathlib import Path

import frontmatter


def parse_issue_file(file_path: Path) -> tuple[str, dict]:
    """Parse a markdown issue file.

    Returns:
        (issue, metadata) where issue is the body text and metadata is the
        frontmatter dict. The optional "context" key carries user context.
        If no frontmatter, metadata is {}.
    """
    post = frontmatter.load(str(file_path))
    issue = post.content.strip()
    metadata = dict(post.metadata)
    return issue, metadata
