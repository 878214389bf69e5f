from typing import List, Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

MAX_URL_LENGTH = 2048
ALLOWED_SCHEMES = ("http", "https")

_http_url = TypeAdapter(HttpUrl)


def original_url_errors(url: Optional[str]) -> List[str]:
    """Return the validation messages for ``url``; empty when it is acceptable.

    Blank input only reports the blank message, never the format one.
    """
    if url is None or not isinstance(url, str) or not url.strip():
        return ["Original url can't be blank"]

    if len(url) > MAX_URL_LENGTH:
        return [f"Original url is too long (maximum is {MAX_URL_LENGTH} characters)"]

    # HttpUrl trims and percent-encodes some input; the stored value is the raw string
    if any(ch.isspace() for ch in url):
        return ["Original url must be a valid URL"]

    try:
        parsed = _http_url.validate_python(url)
    except ValidationError:
        return ["Original url must be a valid URL"]

    if parsed.scheme not in ALLOWED_SCHEMES or not parsed.host:
        return ["Original url must be a valid URL"]

    return []
