# downloads/paths.py

import re

# Characters that are unsafe in archive member names on at least one
# common platform.
UNSAFE_CHARS = re.compile(r'[#<>:"/\\|?*]')

# A member name cannot hold these: zipfile cuts the name at NUL and lone
# surrogates do not encode to UTF-8.
UNREPRESENTABLE_CHARS = re.compile("[\x00\ud800-\udfff]")

DEFAULT_FILE_NAME = "file"
DEFAULT_PROJECT_NAME = "Project"
DEFAULT_DOWNLOAD_NAME = "download.zip"


def sanitize(raw: str, fallback: str) -> str:
    safe = UNSAFE_CHARS.sub("", UNREPRESENTABLE_CHARS.sub("", raw or ""))
    if not safe:
        return fallback
    return safe


def build_archive_path(entry) -> str:
    """
    Member name for an entry inside the archive:

        [<ProjectId>.<ProjectName>/][<Folder>/]<FileName>

    The folder is taken verbatim, it is the only source of nesting below
    the project directory. Only characters no member name can carry are
    dropped from it.
    """
    path = ""

    if entry.project_id > 0:
        path += f"{entry.project_id}.{sanitize(entry.project_name, DEFAULT_PROJECT_NAME)}/"

    folder = UNREPRESENTABLE_CHARS.sub("", entry.folder)
    if folder:
        path += folder
        if not path.endswith("/"):
            path += "/"

    return path + sanitize(entry.file_name, DEFAULT_FILE_NAME)
