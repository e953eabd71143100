"""Video URL validation and normalization.

Every stored record video is in one canonical form per host so that two
submissions of the same video compare equal as plain strings.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from ..errors import InvalidVideo

SCHEMES = {"http", "https"}

YOUTUBE_FORMAT = (
    "https://www.youtube.com/watch?v={video_id}' or 'https://m.youtube.com/watch?v={video_id}' "
    "or 'https://youtube.com/watch?v={video_id}' or 'https://youtu.be/{video_id}"
)
TWITCH_FORMAT = (
    "https://www.twitch.tv/videos/{video_id}' or 'https://twitch.tv/videos/{video_id}' "
    "or 'https://www.twitch.tv/{channel_name}/v/{video_id}"
)
EVERYPLAY_FORMAT = "https://everyplay.com/videos/{video_id}' or 'https://www.everyplay.com/videos/{video_id}"
VIMEO_FORMAT = "https://vimeo.com/{video_id}' or 'https://www.vimeo.com/{video_id}"
BILIBILI_FORMAT = "https://www.bilibili.com/video/{video_id}' or 'https://bilibili.com/video/{video_id}"

YOUTUBE_HOSTS = {"www.youtube.com", "m.youtube.com", "youtube.com"}
TWITCH_HOSTS = {"www.twitch.tv", "twitch.tv"}
EVERYPLAY_HOSTS = {"everyplay.com", "www.everyplay.com"}
VIMEO_HOSTS = {"vimeo.com", "www.vimeo.com"}
BILIBILI_HOSTS = {"www.bilibili.com", "bilibili.com"}

# YouTube ids are 11 characters; anything after that is tracking noise.
YOUTUBE_ID_LENGTH = 11


def _youtube(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id[:YOUTUBE_ID_LENGTH]}"


def normalize_video(url: str) -> str:
    """Return the canonical form of ``url`` or raise ``InvalidVideo``."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError as exc:
        raise InvalidVideo("Malformed video URL") from exc

    if parts.scheme not in SCHEMES:
        raise InvalidVideo("The video URL must use http or https")
    if parts.username or parts.password:
        raise InvalidVideo("The video URL must not contain credentials")
    if not host:
        raise InvalidVideo("Malformed video URL")

    segments = parts.path.split("/")[1:] if parts.path else []

    if host in YOUTUBE_HOSTS:
        if parts.path == "/watch":
            video_ids = parse_qs(parts.query).get("v")
            if video_ids and video_ids[0]:
                return _youtube(video_ids[0])
        raise InvalidVideo("Invalid YouTube URL", YOUTUBE_FORMAT)

    if host == "youtu.be":
        if len(segments) == 1 and segments[0]:
            return _youtube(segments[0])
        raise InvalidVideo("Invalid YouTube URL", YOUTUBE_FORMAT)

    if host in TWITCH_HOSTS:
        if len(segments) == 2 and segments[0] == "videos" and segments[1]:
            return f"https://www.twitch.tv/videos/{segments[1]}"
        if len(segments) == 3 and segments[1] == "v" and segments[2]:
            return f"https://www.twitch.tv/videos/{segments[2]}"
        raise InvalidVideo("Invalid Twitch URL", TWITCH_FORMAT)

    if host in EVERYPLAY_HOSTS:
        if len(segments) == 2 and segments[0] == "videos" and segments[1]:
            return f"https://everyplay.com/videos/{segments[1]}"
        raise InvalidVideo("Invalid Everyplay URL", EVERYPLAY_FORMAT)

    if host in BILIBILI_HOSTS:
        if len(segments) == 2 and segments[0] == "video" and segments[1]:
            return f"https://www.bilibili.com/video/{segments[1]}"
        raise InvalidVideo("Invalid Bilibili URL", BILIBILI_FORMAT)

    if host in VIMEO_HOSTS:
        if len(segments) == 1 and segments[0]:
            return f"https://vimeo.com/{segments[0]}"
        raise InvalidVideo("Invalid Vimeo URL", VIMEO_FORMAT)

    raise InvalidVideo(f"Unsupported video host: {host}")
