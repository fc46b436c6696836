"""
URL Utilities Module for the lesson scraper

Constants for the course platform and the embedded media host, plus the
pure helpers that build lesson URLs and pull media identifiers out of the
player's script sources. Nothing in here touches the browser.
"""
from urllib.parse import urlparse


# Course platform
PLATFORM_HOST = "courses.ardanlabs.com"
PLATFORM_BASE = f"https://{PLATFORM_HOST}"
LESSON_URL_TEMPLATE = PLATFORM_BASE + "/courses/take/%s/lessons/%s"
TEXT_URL_TEMPLATE = PLATFORM_BASE + "/courses/take/%s/texts/%s"
COURSE_API_TEMPLATE = PLATFORM_BASE + "/api/course_player/v2/courses/%s"

# Authentication cookie set by the platform on "remember me" logins
SESSION_COOKIE_NAME = "remember_user_token"

# Embedded player script, e.g. https://fast.wistia.com/embed/medias/ABC123.jsonp
MEDIA_HOST_PREFIX = "https://fast.wistia.com/embed/medias/"
MEDIA_ID_SUFFIX = ".jsonp"
MEDIA_ID_SEGMENT = 3

INVALID_FILENAME_CHARS = ["/", "\\", ":", "*", "?", "\"", "<", ">", "|"]


def build_lesson_url(course_slug, lesson_slug, template=LESSON_URL_TEMPLATE):
    """
    Build a lesson URL from a two-placeholder template.

    The course slug fills the first placeholder and the lesson slug the second.

    Args:
        course_slug (str): Slug of the course
        lesson_slug (str): Slug of the lesson
        template (str): URL template with two '%s' placeholders

    Returns:
        str: The lesson URL
    """
    return template % (course_slug, lesson_slug)


def is_media_script_src(src):
    """Return True if a script source is served from the media host."""
    return isinstance(src, str) and src.startswith(MEDIA_HOST_PREFIX)


def extract_media_id(src):
    """
    Extract the media identifier from a player script source URL.

    Args:
        src (str): The src attribute of a script element

    Returns:
        str: The media identifier, or None if the source is not a media script
    """
    if not is_media_script_src(src):
        return None

    try:
        segment = urlparse(src).path.split("/")[MEDIA_ID_SEGMENT]
    except IndexError:
        return None

    media_id = segment.replace(MEDIA_ID_SUFFIX, "", 1)
    return media_id or None


def extract_media_ids(sources):
    """
    Extract media identifiers from a list of script sources.

    Args:
        sources (list): Script src values in document order

    Returns:
        list: Identifiers of every matching source, in the same order
    """
    media_ids = []
    for src in sources or []:
        media_id = extract_media_id(src)
        if media_id:
            media_ids.append(media_id)
    return media_ids


def build_label(index, name):
    """Label an output item with its original lesson position."""
    return f"{index}_{name}"


def sanitize_filename(filename):
    """Replace characters that are not safe in file and directory names."""
    result = filename
    for char in INVALID_FILENAME_CHARS:
        result = result.replace(char, "_")
    return result


def is_text_lesson(lesson):
    """Return True if the lesson's content type marks it as a text lesson."""
    return "text" in (lesson.display_name or "").lower()
