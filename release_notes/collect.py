# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import collections.abc
import logging

import release_notes.gateway as rng
import release_notes.model as rnm

logger = logging.getLogger(__name__)

# far enough in the past to predate any commit; `<ref>@{<date>}` then resolves to the very
# beginning of `ref`'s history
INITIAL_HISTORY_DATE = '1990-01-01'


def initial_history_ref(release: rnm.Release) -> str:
    return f'{release.target_commitish}@{{{INITIAL_HISTORY_DATE}}}'


def compare_base_ref(
    release: rnm.Release,
    previous_release: rnm.Release | None,
) -> str:
    '''
    returns the reference to compare `release` against: the previous release's tag, or (for the
    first release of a release-line) the beginning of history of the release's target-commitish.
    '''
    if previous_release:
        return previous_release.tag_name

    return initial_history_ref(release)


def expand_commit_range(
    gateway: rng.RepositoryGateway,
    base: str,
    head: str,
) -> rnm.CommitRange:
    logger.info(f'considering commits in range {base}...{head}')
    commit_range = gateway.compare_commits(
        base=base,
        head=head,
    )
    logger.info(f'found {len(commit_range.commits)} commits')

    if commit_range.truncated:
        logger.warning(
            f'comparison was truncated by GitHub: {commit_range.total_commits=}, only '
            f'{len(commit_range.commits)} commits will be considered'
        )

    return commit_range


def collect_pull_requests(
    gateway: rng.RepositoryGateway,
    commit_range: rnm.CommitRange,
) -> list[rnm.PullRequest]:
    '''
    returns the pull-requests associated to the commits of `commit_range`, in commit-order. Pull
    requests associated to more than one commit are returned once per commit.
    '''
    pulls = []

    for commit in commit_range.commits:
        commit_pulls = gateway.pull_requests_for_commit(commit.sha)
        if commit_pulls:
            logger.debug(
                f"\t{commit.sha:.6} -> {','.join(str(pr.number) for pr in commit_pulls)}"
            )
        pulls.extend(commit_pulls)

    logger.info(f'found {len(pulls)} associated pull requests')
    return pulls


def filter_pull_requests(
    pulls: collections.abc.Iterable[rnm.PullRequest],
    label: str | None,
) -> list[rnm.PullRequest]:
    '''
    retains (in order) pull-requests labelled w/ `label` (exact match). If `label` is empty (or
    `None`), all pull-requests are retained.
    '''
    if not label:
        return list(pulls)

    return [pr for pr in pulls if pr.has_label(label)]
