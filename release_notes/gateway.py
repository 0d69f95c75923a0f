# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

'''
thin adapter for the parts of GitHub's REST-API needed for publishing release-notes.

Releases and commit-comparisons are handled through github3's repository-api. Listing a single
page of releases and looking up pull-requests for a commit (which github3 does not offer) is done
w/ the (authenticated) session of the same `github3.GitHub` instance, so authentication,
api-base-url (GitHub vs. GitHub-Enterprise) and timeouts are honoured for all requests.
http-404 is reported as `NotFound`, all other failures as `GatewayError`.
'''

import contextlib
import functools
import logging

import dacite
import github3
import github3.exceptions
import github3.repos
import github3.repos.release
import requests

import release_notes.errors as rne
import release_notes.model as rnm

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _github3_errors(action: str):
    try:
        yield
    except github3.exceptions.NotFoundError as nfe:
        raise rne.NotFound(f'{action}: not found ({nfe})') from nfe
    except github3.exceptions.GitHubException as ghe:
        raise rne.GatewayError(
            f'{action} failed: {ghe}',
            status_code=getattr(ghe, 'code', None),
        ) from ghe


class RepositoryGateway:
    def __init__(
        self,
        owner: str,
        name: str,
        github_api: github3.GitHub=None,
    ):
        '''
        Args:
            owner (str):    repository owner (also called organisation in GitHub)
            name (str):     repository name
            github_api (GitHub): github api to use
        '''
        if not github_api:
            raise ValueError('must pass github_api')

        self.github = github_api
        self.session = github_api.session
        self.owner = owner
        self.repository_name = name

    @functools.cached_property
    def repository(self) -> github3.repos.Repository:
        with _github3_errors(f'retrieve repository {self.owner}/{self.repository_name}'):
            repository = self.github.repository(self.owner, self.repository_name)

        if not repository:
            raise rne.NotFound(f'repository {self.owner}/{self.repository_name} not found')

        return repository

    def _url(self, *parts) -> str:
        return self.session.build_url(
            'repos',
            self.owner,
            self.repository_name,
            *parts,
        )

    def _get_json(
        self,
        url: str,
        **kwargs,
    ):
        logger.debug(f'GET {url} {kwargs.get("params")=}')
        try:
            response = self.session.get(url, **kwargs)
        except requests.exceptions.RequestException as rqe:
            raise rne.GatewayError(f'GET {url} failed: {rqe}') from rqe

        if response.status_code == 404:
            raise rne.NotFound(f'GET {url}: not found')

        if response.status_code != 200:
            cause = None
            if response.status_code >= 400:
                cause = github3.exceptions.error_for(response)
            raise rne.GatewayError(
                f'GET {url}: unexpected {response.status_code=} ({cause})',
                status_code=response.status_code,
            ) from cause

        try:
            return response.json()
        except ValueError as ve:
            raise rne.GatewayError(f'GET {url}: invalid json in response') from ve

    def _parse(self, data_class, raw):
        try:
            return rnm.from_json(data_class, raw)
        except (dacite.DaciteError, AttributeError, TypeError) as e:
            raise rne.GatewayError(f'failed to parse {data_class.__name__}: {e}') from e

    def _to_release(
        self,
        release: github3.repos.release.Release | None,
        action: str,
    ) -> rnm.Release:
        if not release:
            raise rne.GatewayError(f'{action}: GitHub returned no release')

        # read attributes rather than `as_dict()`, which is not refreshed by `Release.edit`
        return rnm.Release(
            id=release.id,
            tag_name=release.tag_name,
            target_commitish=release.target_commitish,
            name=release.name,
            body=release.body,
            draft=release.draft,
            prerelease=release.prerelease,
            html_url=release.html_url,
        )

    def get_release(self, tag: str) -> rnm.Release:
        action = f'retrieve release for {tag=}'
        with _github3_errors(action):
            release = self.repository.release_from_tag(tag)

        if not release:
            raise rne.NotFound(f'{action}: not found')

        return self._to_release(release, action=action)

    def list_releases(
        self,
        page: int,
        page_size: int,
    ) -> list[rnm.Release]:
        '''
        returns releases on the given page (1-based), ordered as returned by GitHub (most recent
        first). An empty list indicates the end of pagination.

        `github3.repos.Repository.releases` always follows all pages, hence the explicit request.
        '''
        raw = self._get_json(
            self._url('releases'),
            params={
                'per_page': page_size,
                'page': page,
            },
        )
        if not isinstance(raw, list):
            raise rne.GatewayError(f'expected a list of releases, got {type(raw)=}')

        return [self._parse(rnm.Release, r) for r in raw]

    def create_release(self, release: rnm.ReleaseRequest) -> rnm.Release:
        action = f'create release for {release.tag_name=}'
        with _github3_errors(action):
            created = self.repository.create_release(**release.as_payload())

        return self._to_release(created, action=action)

    def update_release(self, release: rnm.ReleaseUpdate) -> rnm.Release:
        action = f'update release {release.id=} ({release.tag_name=})'
        with _github3_errors(action):
            existing = self.repository.release(release.id)
            if not existing:
                raise rne.NotFound(f'{action}: release not found')

            if not existing.edit(**release.as_payload()):
                # github3 reports http-404 on edit as `False`
                raise rne.NotFound(f'{action}: release not found')

        return self._to_release(existing, action=action)

    def compare_commits(
        self,
        base: str,
        head: str,
    ) -> rnm.CommitRange:
        action = f'compare {base}...{head}'
        with _github3_errors(action):
            comparison = self.repository.compare_commits(base, head)

        if not comparison:
            raise rne.GatewayError(f'{action}: GitHub returned no comparison')

        try:
            commits = tuple(rnm.Commit(sha=c.sha) for c in comparison.original_commits)
            total_commits = comparison.total_commits
        except (AttributeError, TypeError) as e:
            raise rne.GatewayError(f'{action}: unexpected comparison: {e}') from e

        return rnm.CommitRange(
            base=base,
            head=head,
            commits=commits,
            total_commits=total_commits,
        )

    def pull_requests_for_commit(
        self,
        sha: str,
        page_size: int=100,
    ) -> list[rnm.PullRequest]:
        raw = self._get_json(
            self._url('commits', sha, 'pulls'),
            params={
                'per_page': page_size,
            },
        )
        if not isinstance(raw, list):
            raise rne.GatewayError(f'expected a list of pull requests for {sha=}, got {type(raw)=}')

        return [self._parse(rnm.PullRequest, pr) for pr in raw]
