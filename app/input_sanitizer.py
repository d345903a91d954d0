import html
import re
from typing import Any, Dict, Optional
import bleach


class InputSanitizer:
    """Input sanitization utility to prevent XSS attacks"""

    # Allowed HTML tags and attributes for blog bodies (rich text)
    ALLOWED_TAGS = [
        'p', 'br', 'strong', 'em', 'u', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6',
        'ul', 'ol', 'li', 'blockquote', 'code', 'pre', 'a', 'img'
    ]

    ALLOWED_ATTRIBUTES = {
        '*': ['class', 'id'],
        'a': ['href', 'title'],
        'img': ['src', 'alt', 'title'],
    }

    ALLOWED_PROTOCOLS = ['http', 'https', 'mailto']

    @staticmethod
    def sanitize_html(html_content: str) -> str:
        """Sanitize HTML content while preserving safe formatting tags"""
        if not isinstance(html_content, str):
            return ""

        return bleach.clean(
            html_content,
            tags=InputSanitizer.ALLOWED_TAGS,
            attributes=InputSanitizer.ALLOWED_ATTRIBUTES,
            protocols=InputSanitizer.ALLOWED_PROTOCOLS,
            strip=True,
            strip_comments=True,
        ).strip()

    @staticmethod
    def strip_markup(text: str) -> str:
        """Drop every tag, keep the text as typed (comments are plain text)"""
        if not isinstance(text, str):
            return ""

        cleaned = bleach.clean(text, tags=[], attributes={}, strip=True, strip_comments=True)
        # bleach entity-escapes the remaining text
        return html.unescape(cleaned).strip()

    @staticmethod
    def sanitize_email(email: str) -> str:
        """Sanitize email input"""
        if not isinstance(email, str):
            return ""

        return email.strip().lower()

    @staticmethod
    def sanitize_phone(phone: Optional[str]) -> Optional[str]:
        """Keep digits and a leading + only"""
        if not isinstance(phone, str):
            return phone

        return re.sub(r'[^\d+]', '', phone)

    @staticmethod
    def sanitize_name(name: str) -> str:
        """Sanitize name input"""
        if not isinstance(name, str):
            return ""

        name = InputSanitizer.strip_markup(name)

        # Remove extra whitespace
        return re.sub(r'\s+', ' ', name).strip()

    @staticmethod
    def sanitize_url(url: Optional[str]) -> Optional[str]:
        """
        Sanitize image/link URLs.

        Absolute http(s) URLs and site-relative paths (``/uploads/...``) pass;
        anything else, ``javascript:`` included, becomes an empty string.
        """
        if url is None:
            return None
        if not isinstance(url, str):
            return ""

        url = url.strip()
        if not url:
            return ""

        if url.startswith(('http://', 'https://')) or (
            url.startswith('/') and not url.startswith('//')
        ):
            return url

        return ""

    def sanitize_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Sanitize the string values of a profile/registration payload"""
        sanitized = {}

        for key, value in data.items():
            lowered = key.lower()
            if isinstance(value, str):
                if 'email' in lowered:
                    sanitized[key] = self.sanitize_email(value)
                elif 'phone' in lowered:
                    sanitized[key] = self.sanitize_phone(value)
                elif 'password' in lowered:
                    sanitized[key] = value
                elif 'name' in lowered:
                    sanitized[key] = self.sanitize_name(value)
                elif 'image' in lowered or 'url' in lowered:
                    sanitized[key] = self.sanitize_url(value)
                else:
                    sanitized[key] = self.strip_markup(value)
            else:
                sanitized[key] = value

        return sanitized


# Global sanitizer instance
sanitizer = InputSanitizer()
