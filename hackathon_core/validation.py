"""
Input sanitization for caller-supplied text
Trims, bounds and strips control characters before records reach the guards
"""

import logging
import re

from .types import SubmissionData

logger = logging.getLogger(__name__)

# Control characters and markup delimiters never belong in display names
_UNSAFE_NAME_CHARS = re.compile(r'[<>{}\\|;`"\x00-\x1f\x7f]')


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: object, max_length: int = 255) -> str:
        """Sanitize string input"""
        if not isinstance(value, str):
            return str(value)[:max_length]

        # Strip whitespace
        value = value.strip()

        # Limit length
        value = value[:max_length]

        # Remove null bytes
        value = value.replace("\0", "")

        return value

    @staticmethod
    def sanitize_team_name(name: str) -> str:
        """Sanitize team name for display - keeps Unicode letters, drops markup"""
        cleaned = InputSanitizer.sanitize_string(name, 100)
        cleaned = _UNSAFE_NAME_CHARS.sub("", cleaned)
        # Collapse runs of whitespace left behind by removed characters
        return re.sub(r"\s+", " ", cleaned).strip()

    @staticmethod
    def sanitize_optional_url(value: str | None) -> str | None:
        """Trim a URL field; blank becomes None"""
        if value is None:
            return None
        cleaned = InputSanitizer.sanitize_string(value, 4096)
        return cleaned or None

    @staticmethod
    def sanitize_submission(data: SubmissionData) -> SubmissionData:
        """
        Trim submission text fields and drop blank technologies

        Non-string technology entries are kept so validation can still report them.
        """
        technologies = []
        for tech in data.technologies or []:
            if isinstance(tech, str):
                tech = tech.strip()
                if not tech:
                    continue
            technologies.append(tech)

        sanitized = data.model_copy(
            update={
                "project_name": (data.project_name or "").strip(),
                "description": (data.description or "").strip(),
                "demo_url": InputSanitizer.sanitize_optional_url(data.demo_url),
                "github_repo": InputSanitizer.sanitize_optional_url(data.github_repo),
                "video_url": InputSanitizer.sanitize_optional_url(data.video_url),
                "technologies": technologies,
            }
        )
        if sanitized != data:
            logger.debug("Submission data normalized during sanitization")
        return sanitized


# ==================== EXPORT ====================

__all__ = [
    "InputSanitizer",
]
