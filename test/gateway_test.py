from unittest.mock import MagicMock

import github3.exceptions
import pytest
import requests

import release_notes.errors as rne
import release_notes.gateway as rng
import release_notes.model as rnm

API_URL = 'https://api.github.com'


def response(status_code: int=200, json=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json
    resp.headers = {}
    return resp


def github3_error(status_code: int, message: str='boom'):
    return github3.exceptions.error_for(
        response(status_code=status_code, json={'message': message}),
    )


def release_json(tag_name: str, id: int=1, target_commitish: str='master') -> dict:
    return {
        'id': id,
        'tag_name': tag_name,
        'target_commitish': target_commitish,
        'name': tag_name,
        'body': '',
        'draft': False,
        'prerelease': False,
        'html_url': f'https://github.com/acme/widgets/releases/tag/{tag_name}',
    }


def github3_release(tag_name: str, **kwargs):
    release = MagicMock()
    for attr, value in release_json(tag_name, **kwargs).items():
        setattr(release, attr, value)
    return release


@pytest.fixture
def repository():
    return MagicMock()


@pytest.fixture
def github_api(repository):
    api = MagicMock()
    api.repository.return_value = repository
    api.session.build_url.side_effect = lambda *parts: '/'.join((API_URL, *parts))
    return api


@pytest.fixture
def gateway(github_api):
    return rng.RepositoryGateway(
        owner='acme',
        name='widgets',
        github_api=github_api,
    )


def test_ctor_requires_github_api():
    with pytest.raises(ValueError):
        rng.RepositoryGateway(owner='acme', name='widgets')


def test_repository_is_retrieved_lazily_and_once(gateway, github_api, repository):
    repository.release_from_tag.return_value = github3_release('v1')
    github_api.repository.assert_not_called()

    gateway.get_release('v1')
    gateway.get_release('v1')

    github_api.repository.assert_called_once_with('acme', 'widgets')


def test_repository_not_found(gateway, github_api):
    github_api.repository.side_effect = github3_error(404)

    with pytest.raises(rne.NotFound):
        gateway.get_release('v1')


def test_get_release(gateway, repository):
    repository.release_from_tag.return_value = github3_release('v1/2.0.0', id=3)

    release = gateway.get_release('v1/2.0.0')

    assert release == rnm.Release(
        id=3,
        tag_name='v1/2.0.0',
        target_commitish='master',
        name='v1/2.0.0',
        body='',
        html_url='https://github.com/acme/widgets/releases/tag/v1/2.0.0',
    )
    repository.release_from_tag.assert_called_once_with('v1/2.0.0')


def test_get_release_not_found(gateway, repository):
    repository.release_from_tag.side_effect = github3_error(404, 'Not Found')

    with pytest.raises(rne.NotFound) as exc_info:
        gateway.get_release('v1/2.0.0')

    assert exc_info.value.status_code == 404


@pytest.mark.parametrize('status_code', [401, 403, 422, 500, 502])
def test_http_errors_other_than_not_found(gateway, repository, status_code):
    repository.release_from_tag.side_effect = github3_error(status_code)

    with pytest.raises(rne.GatewayError) as exc_info:
        gateway.get_release('v1/2.0.0')

    assert not isinstance(exc_info.value, rne.NotFound)
    assert exc_info.value.status_code == status_code


def test_github3_transport_errors(gateway, repository):
    repository.release_from_tag.side_effect = github3.exceptions.ConnectionError(
        requests.exceptions.ConnectionError('offline'),
    )

    with pytest.raises(rne.GatewayError, match='offline'):
        gateway.get_release('v1')


def test_session_transport_errors(gateway, github_api):
    github_api.session.get.side_effect = requests.exceptions.ConnectionError('offline')

    with pytest.raises(rne.GatewayError, match='offline'):
        gateway.list_releases(page=1, page_size=30)


def test_invalid_json(gateway, github_api):
    resp = response()
    resp.json.side_effect = ValueError('no json')
    github_api.session.get.return_value = resp

    with pytest.raises(rne.GatewayError, match='invalid json'):
        gateway.list_releases(page=1, page_size=30)


def test_unparsable_payload(gateway, github_api):
    github_api.session.get.return_value = response(json=[{'id': 'not-an-int'}])

    with pytest.raises(rne.GatewayError, match='failed to parse Release'):
        gateway.list_releases(page=1, page_size=30)


@pytest.mark.parametrize('status_code', [404, 500])
def test_list_releases_http_errors(gateway, github_api, status_code):
    github_api.session.get.return_value = response(status_code=status_code, json={})

    with pytest.raises(rne.GatewayError) as exc_info:
        gateway.list_releases(page=1, page_size=30)

    assert isinstance(exc_info.value, rne.NotFound) == (status_code == 404)
    assert exc_info.value.status_code == status_code


def test_list_releases(gateway, github_api):
    github_api.session.get.return_value = response(json=[
        release_json('v1/2.1.0', id=2),
        release_json('v1/2.0.0', id=1),
    ])

    releases = gateway.list_releases(page=2, page_size=30)

    assert [r.tag_name for r in releases] == ['v1/2.1.0', 'v1/2.0.0']
    github_api.session.get.assert_called_once_with(
        f'{API_URL}/repos/acme/widgets/releases',
        params={'per_page': 30, 'page': 2},
    )


def test_list_releases_empty_page(gateway, github_api):
    github_api.session.get.return_value = response(json=[])

    assert gateway.list_releases(page=5, page_size=30) == []


def test_list_releases_not_a_list(gateway, github_api):
    github_api.session.get.return_value = response(json={'message': 'surprise'})

    with pytest.raises(rne.GatewayError, match='expected a list of releases'):
        gateway.list_releases(page=1, page_size=30)


def test_create_release(gateway, repository):
    repository.create_release.return_value = github3_release(
        'v1/2.0.0',
        id=7,
        target_commitish='main',
    )

    created = gateway.create_release(
        rnm.ReleaseRequest(tag_name='v1/2.0.0', name='v1/2.0.0'),
    )

    assert created.id == 7
    assert created.target_commitish == 'main'
    repository.create_release.assert_called_once_with(
        tag_name='v1/2.0.0',
        name='v1/2.0.0',
        draft=False,
        prerelease=False,
    )


def test_create_release_rejected(gateway, repository):
    repository.create_release.side_effect = github3_error(422, 'Validation Failed')

    with pytest.raises(rne.GatewayError) as exc_info:
        gateway.create_release(rnm.ReleaseRequest(tag_name='v1', name='v1'))

    assert exc_info.value.status_code == 422


def test_update_release(gateway, repository):
    existing = rnm.Release(id=7, tag_name='v1/2.0.0', target_commitish='main')
    remote_release = github3_release('v1/2.0.0', id=7, target_commitish='main')
    remote_release.edit.return_value = True
    repository.release.return_value = remote_release

    gateway.update_release(
        rnm.ReleaseUpdate.for_release(release=existing, name='v1/2.0.0', body='- x\n'),
    )

    repository.release.assert_called_once_with(7)
    remote_release.edit.assert_called_once_with(
        tag_name='v1/2.0.0',
        name='v1/2.0.0',
        body='- x\n',
        target_commitish='main',
        draft=False,
        prerelease=False,
    )


def test_update_vanished_release(gateway, repository):
    existing = rnm.Release(id=7, tag_name='v1/2.0.0', target_commitish='main')
    update = rnm.ReleaseUpdate.for_release(release=existing, name='v1/2.0.0', body='')

    repository.release.return_value.edit.return_value = False
    with pytest.raises(rne.NotFound):
        gateway.update_release(update)

    repository.release.side_effect = github3_error(404)
    with pytest.raises(rne.NotFound):
        gateway.update_release(update)


def test_compare_commits(gateway, repository):
    comparison = MagicMock()
    comparison.total_commits = 2
    comparison.original_commits = [MagicMock(sha='aaa'), MagicMock(sha='bbb')]
    repository.compare_commits.return_value = comparison

    commit_range = gateway.compare_commits(base='v1/2.0.0', head='v1/2.1.0')

    assert commit_range.commits == (rnm.Commit('aaa'), rnm.Commit('bbb'))
    assert commit_range.total_commits == 2
    assert not commit_range.truncated
    repository.compare_commits.assert_called_once_with('v1/2.0.0', 'v1/2.1.0')


def test_compare_commits_unknown_ref(gateway, repository):
    repository.compare_commits.side_effect = github3_error(404)

    with pytest.raises(rne.NotFound):
        gateway.compare_commits(base='does-not-exist', head='v1/2.1.0')


def test_compare_commits_non_mapping_payload(gateway, repository):
    repository.compare_commits.side_effect = github3.exceptions.UnprocessableResponseBody(
        "GitHub's API returned a body that could not be handled",
        ['not', 'a', 'mapping'],
    )

    with pytest.raises(rne.GatewayError) as exc_info:
        gateway.compare_commits(base='v1/2.0.0', head='v1/2.1.0')

    assert not isinstance(exc_info.value, rne.NotFound)


@pytest.mark.parametrize('comparison', [
    None,
    MagicMock(original_commits=None, total_commits=0),
])
def test_compare_commits_unexpected_payload(gateway, repository, comparison):
    repository.compare_commits.return_value = comparison

    with pytest.raises(rne.GatewayError):
        gateway.compare_commits(base='v1/2.0.0', head='v1/2.1.0')


def test_pull_requests_for_commit(gateway, github_api):
    github_api.session.get.return_value = response(json=[
        {
            'number': 12,
            'title': 'add feature',
            'html_url': 'https://github.com/acme/widgets/pull/12',
            'labels': [{'name': 'release-note'}],
            'user': {'login': 'octocat'},
        },
    ])

    pulls = gateway.pull_requests_for_commit('aaa')

    assert len(pulls) == 1
    assert pulls[0].number == 12
    assert pulls[0].has_label('release-note')
    github_api.session.get.assert_called_once_with(
        f'{API_URL}/repos/acme/widgets/commits/aaa/pulls',
        params={'per_page': 100},
    )
