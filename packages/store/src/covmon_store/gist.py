"""GistStore — remote baseline reports kept in a GitHub Gist.

Each baseline is one file inside the Gist. Gist file names cannot contain
"/", so the key coverage-baseline/clover.xml is stored as
coverage-baseline__clover.xml. The content is the raw report text.

The Gist API returns at most 1 MB of a file inline and flags the rest as
truncated; such files are fetched in full from their raw_url.

The default GITHUB_TOKEN in Actions has no Gist scope; use a PAT with the
'gist' scope stored as a repository secret.
"""

from __future__ import annotations

import logging

import requests

from covmon_store.base import BaselineStore, baseline_key

logger = logging.getLogger(__name__)


def _gist_filename(name: str) -> str:
    return name.replace("/", "__")


class GistStore(BaselineStore):
    """Stores baseline reports as files of a single Gist.

    Unlike LocalStore, errors reaching GitHub propagate as GithubException so
    the run fails instead of silently skipping the regression check.
    """

    def __init__(self, gist_id: str, token: str):
        try:
            from github import Github
        except ImportError:
            raise ImportError("PyGithub is required for GistStore.")
        self._gist_id = gist_id
        self._token = token
        self._gh = Github(token)

    def _get_gist(self):
        return self._gh.get_gist(self._gist_id)

    def key_for(self, filename: str) -> str:
        return baseline_key(filename)

    def load(self, name: str) -> str | None:
        gist = self._get_gist()
        file_obj = gist.files.get(_gist_filename(name))
        if file_obj is None:
            logger.debug("Gist %s has no file for %s", self._gist_id, name)
            return None
        if file_obj.truncated:
            logger.debug("Gist file for %s is truncated; fetching %s", name, file_obj.raw_url)
            return self._fetch_raw(file_obj.raw_url)
        return file_obj.content

    def _fetch_raw(self, url: str) -> str:
        resp = requests.get(url, headers={"Authorization": f"token {self._token}"}, timeout=30)
        resp.raise_for_status()
        return resp.text

    def save(self, name: str, content: str) -> None:
        from github.InputFileContent import InputFileContent

        gist = self._get_gist()
        gist.edit(files={_gist_filename(name): InputFileContent(content)})
        logger.debug("Saved baseline %s to Gist %s", name, self._gist_id)
