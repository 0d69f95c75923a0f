# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import dataclasses
import logging
import os

import dacite
import github3
import yaml

import release_notes.errors as rne
import release_notes.resolve as rnr

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
MAX_PAGE_SIZE = 100


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseNotesFileConfig:
    '''
    optional settings read from a yaml-file; keys may be given in kebab-case, e.g.:

        label: release-note
        release-name: my release
        page-size: 30
        max-pages: 100
        timeout: 30
    '''
    label: str | None = None
    release_name: str | None = None
    page_size: int | None = None
    max_pages: int | None = None
    timeout: float | None = None


@dataclasses.dataclass(frozen=True, kw_only=True)
class ReleaseNotesConfig:
    host: str = 'github.com'
    owner: str
    repo: str
    tag: str
    label: str | None = None
    release_name: str | None = None
    page_size: int = rnr.DEFAULT_PAGE_SIZE
    max_pages: int = rnr.DEFAULT_MAX_PAGES
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    output: str | None = None

    def __post_init__(self):
        if not self.tag:
            raise rne.ConfigError('tag must not be empty')
        if not self.owner or not self.repo:
            raise rne.ConfigError(f'invalid repository: {self.owner=} {self.repo=}')
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise rne.ConfigError(f'page_size must be in range 1..{MAX_PAGE_SIZE}')
        if self.max_pages < 1:
            raise rne.ConfigError('max_pages must be at least 1')
        if self.timeout <= 0:
            raise rne.ConfigError('timeout must be positive')

    @property
    def effective_release_name(self) -> str:
        return self.release_name or self.tag

    @property
    def repo_url(self) -> str:
        return f'{self.host}/{self.owner}/{self.repo}'


def host_org_and_repo(
    repo_url: str=None,
    environ: collections.abc.Mapping[str, str]=os.environ,
) -> tuple[str, str, str]:
    '''
    returns a three-tuple of `host`, `org`, `repo`. If repo_url is passed, it is assumed point to
    a github-hosted repository (it may or may not have a schema). Otherwise, fallback to
    environment variables GITHUB_SERVER_URL, GITHUB_REPOSITORY, as set for GitHub-Actions-runs.
    '''
    if repo_url:
        if '://' in repo_url:
            repo_url = repo_url.split('://')[-1]
        parts = repo_url.strip('/').split('/')
        if len(parts) != 3:
            raise rne.ConfigError(f'{repo_url=} must have the form {{host}}/{{org}}/{{repo}}')
        host, org, repo = parts
        return host, org, repo

    try:
        host = environ.get('GITHUB_SERVER_URL', 'https://github.com').removeprefix('https://')
        org, repo = environ['GITHUB_REPOSITORY'].split('/')
    except KeyError:
        raise rne.ConfigError('must pass repo-url, or set GITHUB_REPOSITORY')
    except ValueError:
        raise rne.ConfigError(
            f'GITHUB_REPOSITORY must have the form {{org}}/{{repo}}: {environ["GITHUB_REPOSITORY"]}'
        )

    return host, org, repo


def read_file_config(path: str) -> ReleaseNotesFileConfig:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except OSError as oe:
        raise rne.ConfigError(f'failed to read configuration from {path=}: {oe}') from oe
    except yaml.YAMLError as ye:
        raise rne.ConfigError(f'invalid yaml in {path=}: {ye}') from ye

    if not raw:
        return ReleaseNotesFileConfig()

    if not isinstance(raw, dict):
        raise rne.ConfigError(f'expected a mapping in {path=}, got {type(raw)=}')

    # kebap -> snake
    raw = {k.replace('-', '_'): v for k, v in raw.items()}

    try:
        return dacite.from_dict(
            data_class=ReleaseNotesFileConfig,
            data=raw,
            config=dacite.Config(
                strict=True,
                type_hooks={float: float},
            ),
        )
    except dacite.DaciteError as de:
        raise rne.ConfigError(f'invalid configuration in {path=}: {de}') from de


def github_api(
    host: str,
    token: str | None=None,
    timeout: float=DEFAULT_TIMEOUT_SECONDS,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance for the given host (github.com, or a
    GitHub-Enterprise-instance), honouring GITHUB_SERVER_URL as set for GitHub-Actions-runs.
    '''
    if host == 'github.com':
        api = github3.GitHub(token=token)
    else:
        server_url = os.environ.get('GITHUB_SERVER_URL', f'https://{host}')
        api = github3.GitHubEnterprise(
            url=server_url,
            token=token,
        )

    if not token:
        logger.warning('no github-auth-token given, will use anonymous access')

    api.session.default_read_timeout = timeout
    return api
