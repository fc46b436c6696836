"""
Course Manifest Module

Loads the static course description (course slug, name and ordered lesson
list) that drives a scraping run. The manifest is normally the course-player
API response saved to disk as response.json; fetch_manifest can download it
with the same session cookie the browser uses.
"""
import json
import requests

from url_utils import COURSE_API_TEMPLATE, PLATFORM_HOST, SESSION_COOKIE_NAME

import logger
log = logger


class ManifestError(Exception):
    """Raised when a course manifest is missing required fields."""


class LessonDescriptor:
    """One lesson of a course: its slug, display name and content type."""

    def __init__(self, slug, name, display_name=""):
        self.slug = slug
        self.name = name
        self.display_name = display_name or ""

    def __repr__(self):
        return f"LessonDescriptor(slug={self.slug!r}, name={self.name!r})"


class CourseManifest:
    """Course slug, course name and the lessons in processing order."""

    def __init__(self, course_slug, course_name, lessons):
        self.course_slug = course_slug
        self.course_name = course_name
        self.lessons = tuple(lessons)

    def __len__(self):
        return len(self.lessons)

    def __repr__(self):
        return (f"CourseManifest(course_slug={self.course_slug!r}, "
                f"course_name={self.course_name!r}, lessons={len(self.lessons)})")


def parse_manifest(data):
    """
    Build a CourseManifest from decoded manifest JSON.

    Args:
        data (dict): Decoded JSON with 'course' and 'contents' keys

    Returns:
        CourseManifest: The parsed manifest

    Raises:
        ManifestError: If the course slug or the lesson sequence is missing
    """
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a JSON object")

    course = data.get("course")
    if not isinstance(course, dict) or not course.get("slug"):
        raise ManifestError("Manifest has no course slug")

    contents = data.get("contents")
    if not isinstance(contents, list):
        raise ManifestError("Manifest has no contents list")

    lessons = []
    for position, content in enumerate(contents):
        if not isinstance(content, dict) or not content.get("slug"):
            raise ManifestError(f"Lesson at position {position} has no slug")
        lessons.append(LessonDescriptor(
            slug=content["slug"],
            name=content.get("name", ""),
            display_name=content.get("display_name", ""),
        ))

    return CourseManifest(course["slug"], course.get("name", course["slug"]), lessons)


def load_manifest(path):
    """
    Read and parse a manifest file.

    Errors opening or decoding the file propagate to the caller.

    Args:
        path (str): Path to the manifest JSON file

    Returns:
        CourseManifest: The parsed manifest
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    manifest = parse_manifest(data)
    log.info(f"Loaded manifest for '{manifest.course_name}' with {len(manifest)} lessons from {path}")
    return manifest


def fetch_manifest(course_slug, session_cookie, session=None):
    """
    Download the course-player JSON for a course.

    Args:
        course_slug (str): Slug of the course
        session_cookie (str): Value of the remember_user_token cookie
        session (requests.Session, optional): Session to reuse

    Returns:
        dict: The decoded course-player response

    Raises:
        ManifestError: If the platform does not return the course
    """
    session = session or requests.Session()
    session.cookies.set(SESSION_COOKIE_NAME, session_cookie, domain=PLATFORM_HOST, path="/")

    url = COURSE_API_TEMPLATE % course_slug
    log.info(f"Fetching course manifest from {url}")
    response = session.get(url, headers={"Accept": "application/json"}, timeout=30)

    if response.status_code != 200:
        raise ManifestError(f"Failed to fetch manifest for {course_slug}: HTTP {response.status_code}")

    return response.json()


def save_manifest(data, path):
    """Write manifest JSON to disk so later runs can load it offline."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    log.info(f"Saved course manifest to {path}")
