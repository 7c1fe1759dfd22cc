from pathlib import Path
from typing import Union

FILE_SCHEME = "file://"


class LocalResourceResolver:
    """
    Single place where local image paths are turned into the locator a
    platform expects, and back into something that can be opened.

    iOS consumers expect ``file://`` URIs; every other platform takes bare
    filesystem paths.
    """

    URI_PLATFORMS = ("ios",)

    def __init__(self, platform: str = "default"):
        self.platform = (platform or "default").lower()

    def to_locator(self, path: Union[str, Path]) -> str:
        path = str(path)
        if self.platform in self.URI_PLATFORMS and not path.startswith(FILE_SCHEME):
            return f"{FILE_SCHEME}{path}"
        return path

    def to_filesystem_path(self, locator: Union[str, Path]) -> Path:
        locator = str(locator)
        if locator.startswith(FILE_SCHEME):
            locator = locator[len(FILE_SCHEME):]
        return Path(locator)
