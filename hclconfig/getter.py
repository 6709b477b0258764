"""
Module fetcher with a directory cache.

Each source lands in its own slot under the cache root. The slot name is
the source itself with ``:``, ``/`` and ``?`` runs flattened to ``_``, so
``github.com/org/repo?ref=v1`` is stored in ``github.com_org_repo_ref=v1``
and fetching the same pinned source twice reuses the slot.
"""
import os
import re
import shutil
import subprocess
from typing import Callable, Optional
from urllib.parse import parse_qs, urlsplit

from rich.console import Console

from hclconfig.errors import FetchError

console = Console(stderr=True)

_SLOT_RE = re.compile(r"[:/?]+")

# get(source, destination, working_dir)
GetFunc = Callable[[str, str, str], None]


def cache_slot(source: str) -> str:
    return _SLOT_RE.sub("_", source)


def _is_local(source: str) -> bool:
    return source.startswith(("./", "../", "/", "file://")) or os.path.isdir(source)


def _copy_local(source: str, dest: str, working: str) -> None:
    path = source[len("file://"):] if source.startswith("file://") else source
    path = os.path.join(working, path)
    if not os.path.isdir(path):
        raise FileNotFoundError(f"'{path}' is not a directory")
    if os.path.exists(dest):
        shutil.rmtree(dest)
    shutil.copytree(path, dest)


def _git_clone(source: str, dest: str, working: str) -> None:
    src = source[len("git::"):] if source.startswith("git::") else source
    parts = urlsplit(src if "://" in src else f"https://{src}")
    ref = parse_qs(parts.query).get("ref", [None])[0]
    url = parts._replace(query="").geturl()

    cmd = ["git", "clone", "--depth", "1"]
    if ref:
        cmd += ["--branch", ref]
    cmd += [url, dest]

    if os.path.exists(dest):
        shutil.rmtree(dest)
    subprocess.run(cmd, cwd=working, check=True, capture_output=True, text=True)


def default_get(source: str, dest: str, working: str) -> None:
    if _is_local(source):
        _copy_local(source, dest, working)
    else:
        _git_clone(source, dest, working)


class Getter:
    def __init__(self, get: Optional[GetFunc] = None) -> None:
        self.get_func = get or default_get

    def get(self, source: str, cache_dir: str, force: bool = False) -> str:
        """
        Materialise ``source`` under ``cache_dir`` and return its local path.
        An existing slot is reused unless ``force`` is set.
        """
        dest = os.path.join(cache_dir, cache_slot(source))

        if os.path.isdir(dest) and not force:
            console.print(f"[dim]Using cached module:[/dim] {source}")
            return dest

        console.print(f"[dim]Fetching module:[/dim] {source}")
        try:
            self.get_func(source, dest, os.getcwd())
        except (OSError, subprocess.CalledProcessError) as exc:
            raise FetchError(source, str(exc)) from exc

        return dest
