"""Slack Block Kit utilities and validation.

Construction helpers for the blocks used in reservation summaries,
announcements and task alerts, plus basic structural validation.
"""

from typing import Dict, List


def validate_blocks(blocks: List[Dict]) -> bool:
    """
    Validate that the provided blocks are valid Slack Block Kit structures.

    Covers the block types built by this module; not exhaustive.

    Args:
        blocks: List of Slack block dictionaries to validate

    Returns:
        bool: True if blocks are structurally valid, False otherwise

    Examples:
        >>> validate_blocks([create_header_block("Hi"), create_divider_block()])
        True

        >>> validate_blocks([{"text": "missing type"}])
        False
    """
    if not isinstance(blocks, list):
        return False

    for block in blocks:
        if not isinstance(block, dict) or "type" not in block:
            return False

        block_type = block.get("type")

        if block_type == "header" and "text" not in block:
            return False

        # Sections carry either text or fields
        if block_type == "section" and not ("text" in block or "fields" in block):
            return False

        if block_type in ("actions", "context") and "elements" not in block:
            return False

    return True


def mrkdwn(text: str) -> Dict:
    """A mrkdwn text object."""
    return {"type": "mrkdwn", "text": text}


def create_section_block(text: str, text_type: str = "mrkdwn") -> Dict:
    """
    Create a section block with the given text.

    Args:
        text: The text content for the section
        text_type: The text type, either 'mrkdwn' or 'plain_text'
    """
    return {"type": "section", "text": {"type": text_type, "text": text}}


def create_fields_block(fields: Dict[str, object]) -> Dict:
    """
    Create a section block of labelled fields.

    Args:
        fields: Ordered mapping of label to value, rendered as "*Label:*\\nvalue"
    """
    return {
        "type": "section",
        "fields": [mrkdwn(f"*{label}:*\n{value}") for label, value in fields.items()],
    }


def create_header_block(text: str) -> Dict:
    """Create a header block with the given text."""
    return {"type": "header", "text": {"type": "plain_text", "text": text}}


def create_divider_block() -> Dict:
    """Create a divider block."""
    return {"type": "divider"}


def create_context_block(elements: List[Dict]) -> Dict:
    """Create a context block with the given elements."""
    return {"type": "context", "elements": elements}


def create_button_actions_block(text: str, url: str, action_id: str) -> Dict:
    """Create an actions block holding a single link button."""
    return {
        "type": "actions",
        "elements": [
            {
                "type": "button",
                "text": {"type": "plain_text", "text": text},
                "url": url,
                "action_id": action_id,
            }
        ],
    }
