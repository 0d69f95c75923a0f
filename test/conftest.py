import pytest

import release_notes.errors as rne
import release_notes.model as rnm


class FakeGateway:
    '''
    in-memory stand-in for `release_notes.gateway.RepositoryGateway`, recording all calls.

    `releases` is ordered as listed by GitHub (most recent first).
    '''
    def __init__(self):
        self.releases: list[rnm.Release] = []
        self.comparisons: dict[tuple[str, str], list[rnm.Commit]] = {}
        self.pulls: dict[str, list[rnm.PullRequest]] = {}
        self.lookup_error: Exception | None = None
        self.list_error: Exception | None = None
        self.default_branch = 'master'
        self.calls = []
        self._next_id = 1000

    @property
    def mutations(self) -> list[tuple]:
        return [
            call for call in self.calls
            if call[0] in ('create_release', 'update_release')
        ]

    def calls_to(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def get_release(self, tag: str) -> rnm.Release:
        self.calls.append(('get_release', tag))
        if self.lookup_error:
            raise self.lookup_error

        for release in self.releases:
            if release.tag_name == tag:
                return release

        raise rne.NotFound(f'no release for {tag=}')

    def list_releases(self, page: int, page_size: int) -> list[rnm.Release]:
        self.calls.append(('list_releases', page, page_size))
        if self.list_error:
            raise self.list_error

        start = (page - 1) * page_size
        return self.releases[start:start + page_size]

    def create_release(self, release: rnm.ReleaseRequest) -> rnm.Release:
        self.calls.append(('create_release', release))
        created = rnm.Release(
            id=self._next_id,
            tag_name=release.tag_name,
            target_commitish=release.target_commitish or self.default_branch,
            name=release.name,
            body=release.body,
            draft=release.draft,
            prerelease=release.prerelease,
        )
        self._next_id += 1
        self.releases.insert(0, created)
        return created

    def update_release(self, release: rnm.ReleaseUpdate) -> rnm.Release:
        self.calls.append(('update_release', release))
        updated = rnm.Release(
            id=release.id,
            tag_name=release.tag_name,
            target_commitish=release.target_commitish,
            name=release.name,
            body=release.body,
            draft=release.draft,
            prerelease=release.prerelease,
        )
        self.releases = [
            updated if r.id == release.id else r
            for r in self.releases
        ]
        return updated

    def compare_commits(self, base: str, head: str) -> rnm.CommitRange:
        self.calls.append(('compare_commits', base, head))
        if (base, head) not in self.comparisons:
            raise rne.NotFound(f'cannot compare {base}...{head}')

        commits = self.comparisons[(base, head)]
        return rnm.CommitRange(
            base=base,
            head=head,
            commits=tuple(commits),
            total_commits=len(commits),
        )

    def pull_requests_for_commit(self, sha: str) -> list[rnm.PullRequest]:
        self.calls.append(('pull_requests_for_commit', sha))
        return list(self.pulls.get(sha, ()))


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def release():
    ids = iter(range(1, 10000))

    def _release(
        tag_name: str,
        target_commitish: str='master',
        id: int | None=None,
        **kwargs,
    ) -> rnm.Release:
        return rnm.Release(
            id=id or next(ids),
            tag_name=tag_name,
            target_commitish=target_commitish,
            name=kwargs.pop('name', tag_name),
            **kwargs,
        )
    return _release


@pytest.fixture
def pull_request():
    def _pull_request(
        number: int,
        labels: tuple[str, ...]=(),
        login: str | None='octocat',
        title: str | None=None,
    ) -> rnm.PullRequest:
        return rnm.PullRequest(
            number=number,
            title=title or f'change #{number}',
            html_url=f'https://github.com/acme/widgets/pull/{number}',
            labels=tuple(rnm.Label(name=label) for label in labels),
            user=rnm.User(login=login) if login else None,
        )
    return _pull_request
